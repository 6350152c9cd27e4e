"""Reservations repository - persistence for reservation records.

Uses raw SQL with psycopg2 (no ORM). The reservations table carries the
no_room_overlap exclusion constraint, so a concurrent overlapping insert fails
with ExclusionViolation even if it passed the overlap query.
"""

from datetime import date

from psycopg2.extensions import cursor as PgCursor

from roombook.domain.models import Reservation
from roombook.domain.room_conflict import assert_no_room_conflict
from roombook.infra.db import fetchall


class ReservationsRepository:
    """Reservation store backed by the reservations table."""

    def assert_no_overlap(
        self,
        cur: PgCursor,
        *,
        room_id: int,
        check_in: date,
        check_out: date,
    ) -> None:
        """Raise DateConflictError if [check_in, check_out) is already taken."""
        assert_no_room_conflict(
            cur, room_id=room_id, check_in=check_in, check_out=check_out
        )

    def insert_reservation(
        self,
        cur: PgCursor,
        *,
        room_id: int,
        check_in: date,
        check_out: date,
    ) -> int:
        """Insert a reservation with version 0.

        Args:
            cur: Database cursor (within transaction).
            room_id: Room being booked.
            check_in: Check-in date.
            check_out: Check-out date.

        Returns:
            The new reservation id.

        Raises:
            psycopg2.errors.ExclusionViolation: If an overlapping reservation
                was committed concurrently.
        """
        cur.execute(
            """
            INSERT INTO reservations (room_id, check_in, check_out, version)
            VALUES (%s, %s, %s, 0)
            RETURNING id
            """,
            (room_id, check_in, check_out),
        )
        row = cur.fetchone()
        return row[0]

    def list_for_room(self, cur: PgCursor, room_id: int) -> list[Reservation]:
        """List a room's reservations ordered by check-in."""
        rows = fetchall(
            cur,
            """
            SELECT id, room_id, check_in, check_out, version
            FROM reservations
            WHERE room_id = %s
            ORDER BY check_in, id
            """,
            (room_id,),
        )
        return [
            Reservation(
                id=row[0],
                room_id=row[1],
                check_in=row[2],
                check_out=row[3],
                version=row[4],
            )
            for row in rows
        ]
