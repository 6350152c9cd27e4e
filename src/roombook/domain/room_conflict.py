"""Room conflict detection.

Centralised logic to check whether a room has overlapping reservations in a
given date range.

Ranges are half-open: [check_in, check_out). Two stays overlap iff
    (new_check_in < existing_check_out) AND (existing_check_in < new_check_out)
so a departure on the same day as the next arrival is not a conflict. This
covers partial overlap at either end as well as containment in both
directions.
"""

from __future__ import annotations

import logging
from datetime import date

from psycopg2.extensions import cursor as PgCursor

from roombook.domain.errors import DateConflictError, InvalidRangeError

logger = logging.getLogger(__name__)


def validate_stay(check_in: date, check_out: date) -> None:
    """Raise InvalidRangeError unless check_in < check_out."""
    if not check_in < check_out:
        raise InvalidRangeError(check_in, check_out)


def ranges_overlap(
    a_start: date,
    a_end: date,
    b_start: date,
    b_end: date,
) -> bool:
    """Return True if [a_start, a_end) and [b_start, b_end) share a night.

    The SQL in assert_no_room_conflict applies the same predicate.
    """
    return a_start < b_end and b_start < a_end


def assert_no_room_conflict(
    cur: PgCursor,
    *,
    room_id: int,
    check_in: date,
    check_out: date,
) -> None:
    """Raise DateConflictError if the room has an overlapping reservation.

    Args:
        cur: Database cursor (should be within a transaction).
        room_id: Room identifier.
        check_in: Desired check-in date (inclusive).
        check_out: Desired check-out date (exclusive / departure day).

    Raises:
        InvalidRangeError: If check_in is not before check_out. Raised before
            the cursor is touched.
        DateConflictError: With the first overlapping reservation by check-in.
    """
    validate_stay(check_in, check_out)

    # existing check_in < new check_out, existing check_out > new check_in
    cur.execute(
        """
        SELECT id, check_in, check_out
        FROM reservations
        WHERE room_id = %s
          AND check_in < %s
          AND check_out > %s
        ORDER BY check_in
        LIMIT 1
        """,
        (room_id, check_out, check_in),
    )
    row = cur.fetchone()
    if row is None:
        return

    logger.warning(
        "room conflict detected",
        extra={
            "extra_fields": {
                "room_id": room_id,
                "requested_check_in": check_in.isoformat(),
                "requested_check_out": check_out.isoformat(),
                "conflicting_reservation_id": row[0],
                "existing_check_in": row[1].isoformat(),
                "existing_check_out": row[2].isoformat(),
            },
        },
    )
    raise DateConflictError(
        room_id=room_id,
        conflicting_reservation_id=row[0],
        existing_check_in=row[1],
        existing_check_out=row[2],
    )
