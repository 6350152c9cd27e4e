"""Rooms repository - read access to the room inventory.

Uses raw SQL with psycopg2 (no ORM). Rooms are read-only for bookings;
insert_room exists for administrative seeding.
"""

from psycopg2.extensions import cursor as PgCursor

from roombook.domain.models import Room
from roombook.infra.db import fetchone


class RoomsRepository:
    """Room store backed by the rooms table."""

    def get_room(self, cur: PgCursor, room_id: int) -> Room | None:
        """Load a room by id.

        Args:
            cur: Database cursor.
            room_id: Room identifier.

        Returns:
            Room, or None if no such room exists.
        """
        row = fetchone(
            cur,
            """
            SELECT id, room_number, available
            FROM rooms
            WHERE id = %s
            """,
            (room_id,),
        )
        if row is None:
            return None
        return Room(id=row[0], room_number=row[1], available=row[2])

    def insert_room(
        self,
        cur: PgCursor,
        *,
        room_number: str,
        available: bool = True,
    ) -> Room:
        """Insert a room; if the number exists, overwrite its available flag and return it."""
        cur.execute(
            """
            INSERT INTO rooms (room_number, available)
            VALUES (%s, %s)
            ON CONFLICT (room_number) DO UPDATE SET available = EXCLUDED.available
            RETURNING id, room_number, available
            """,
            (room_number, available),
        )
        row = cur.fetchone()
        return Room(id=row[0], room_number=row[1], available=row[2])
