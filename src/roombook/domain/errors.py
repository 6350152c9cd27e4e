"""Booking outcomes and the errors that produce them.

The four BookingError subclasses are expected business outcomes. They unwind
a booking attempt (rolling back its transaction) and are then reported as a
BookingResult; none of them indicates a defect.

StoreUnavailableError is different: it wraps unexpected persistence failures
and is propagated, never retried.
"""

from __future__ import annotations

from datetime import date
from enum import Enum


class BookingOutcome(str, Enum):
    BOOKED = "booked"
    ROOM_NOT_FOUND = "room_not_found"
    INVALID_RANGE = "invalid_range"
    DATE_CONFLICT = "date_conflict"
    CONCURRENCY_EXHAUSTED = "concurrency_exhausted"


class BookingError(Exception):
    """Base class for expected booking failures."""

    outcome: BookingOutcome


class RoomNotFoundError(BookingError):
    outcome = BookingOutcome.ROOM_NOT_FOUND

    def __init__(self, room_id: int) -> None:
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class InvalidRangeError(BookingError):
    """Raised when check-in is not strictly before check-out."""

    outcome = BookingOutcome.INVALID_RANGE

    def __init__(self, check_in: date, check_out: date) -> None:
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(
            f"Check-in date {check_in.isoformat()} must be before "
            f"check-out date {check_out.isoformat()}"
        )


class DateConflictError(BookingError):
    """Raised when the room has an overlapping reservation."""

    outcome = BookingOutcome.DATE_CONFLICT

    def __init__(
        self,
        room_id: int,
        conflicting_reservation_id: int,
        existing_check_in: date,
        existing_check_out: date,
    ) -> None:
        self.room_id = room_id
        self.conflicting_reservation_id = conflicting_reservation_id
        self.existing_check_in = existing_check_in
        self.existing_check_out = existing_check_out
        super().__init__("Room already booked for selected dates")


class ConcurrencyExhaustedError(BookingError):
    """Raised when every attempt lost a write conflict."""

    outcome = BookingOutcome.CONCURRENCY_EXHAUSTED

    def __init__(self, room_id: int, attempts: int) -> None:
        self.room_id = room_id
        self.attempts = attempts
        super().__init__(
            f"Could not book room {room_id} after {attempts} attempts "
            "due to concurrent bookings, please try again"
        )


class StoreUnavailableError(Exception):
    """Raised when the reservation store fails for reasons other than a conflict."""
