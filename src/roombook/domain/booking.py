"""Booking domain logic - transactional room booking with conflict retry.

A booking attempt runs in a single transaction:
1. Loads the room (RoomNotFoundError if missing)
2. Checks for overlapping reservations (DateConflictError)
3. Inserts the reservation with version 0
4. Commits

The overlap query alone cannot stop two concurrent attempts from both passing
step 2. The reservations table's exclusion constraint rejects the loser's
insert; that write conflict rolls the attempt back and the booking is retried
from step 1, where the overlap query now sees the winner.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date
from typing import Callable

import psycopg2
from psycopg2.extensions import connection as PgConnection

from roombook.domain.errors import (
    BookingError,
    BookingOutcome,
    ConcurrencyExhaustedError,
    RoomNotFoundError,
    StoreUnavailableError,
)
from roombook.domain.room_conflict import validate_stay
from roombook.infra.db import get_conn, is_write_conflict, txn
from roombook.infra.repositories.reservations_repository import (
    ReservationsRepository,
)
from roombook.infra.repositories.rooms_repository import RoomsRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def get_max_attempts() -> int:
    """Read BOOKING_MAX_ATTEMPTS, defaulting to DEFAULT_MAX_ATTEMPTS.

    Raises:
        ValueError: If the variable is set but not a positive integer.
    """
    raw = os.environ.get("BOOKING_MAX_ATTEMPTS", "").strip()
    if not raw:
        return DEFAULT_MAX_ATTEMPTS
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"BOOKING_MAX_ATTEMPTS must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError("BOOKING_MAX_ATTEMPTS must be >= 1")
    return value


@dataclass(frozen=True)
class BookingResult:
    """Outcome of a booking request.

    reservation_id is set only when outcome is BOOKED; error is set for
    every other outcome.
    """

    outcome: BookingOutcome
    reservation_id: int | None = None
    error: BookingError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is BookingOutcome.BOOKED

    @property
    def message(self) -> str:
        if self.error is not None:
            return str(self.error)
        return "Room booked successfully"

    @classmethod
    def booked(cls, reservation_id: int) -> BookingResult:
        return cls(outcome=BookingOutcome.BOOKED, reservation_id=reservation_id)

    @classmethod
    def failed(cls, error: BookingError) -> BookingResult:
        return cls(outcome=error.outcome, error=error)


class BookingService:
    """Books rooms against the room and reservation stores.

    Args:
        rooms: Room store.
        reservations: Reservation store.
        connect: Connection factory; one connection is used per book_room call.
        max_attempts: Attempts made before giving up on repeated write
            conflicts. Defaults to BOOKING_MAX_ATTEMPTS from the environment.
    """

    def __init__(
        self,
        rooms: RoomsRepository,
        reservations: ReservationsRepository,
        *,
        connect: Callable[[], PgConnection] = get_conn,
        max_attempts: int | None = None,
    ) -> None:
        if max_attempts is None:
            max_attempts = get_max_attempts()
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.rooms = rooms
        self.reservations = reservations
        self.connect = connect
        self.max_attempts = max_attempts

    def book_room(self, room_id: int, check_in: date, check_out: date) -> BookingResult:
        """Try to reserve room_id for [check_in, check_out).

        Returns:
            BookingResult with one of the BookingOutcome values.

        Raises:
            StoreUnavailableError: On any database failure other than a
                write conflict, or when no connection can be made at all
                (including a missing DATABASE_URL). Not retried.
        """
        log_fields = {
            "room_id": room_id,
            "check_in": check_in.isoformat(),
            "check_out": check_out.isoformat(),
        }

        try:
            validate_stay(check_in, check_out)
        except BookingError as exc:
            logger.info("booking rejected", extra={"extra_fields": {**log_fields, "outcome": exc.outcome.value}})
            return BookingResult.failed(exc)

        try:
            conn = self.connect()
        except (psycopg2.Error, RuntimeError) as exc:
            # RuntimeError: get_conn without DATABASE_URL.
            logger.error("store connection failed", exc_info=True, extra={"extra_fields": log_fields})
            raise StoreUnavailableError("reservation store unavailable") from exc

        try:
            result = self._book_with_retry(conn, room_id, check_in, check_out, log_fields)
        finally:
            conn.close()

        if result.ok:
            logger.info(
                "room booked",
                extra={"extra_fields": {**log_fields, "reservation_id": result.reservation_id}},
            )
        else:
            logger.info(
                "booking rejected",
                extra={"extra_fields": {**log_fields, "outcome": result.outcome.value}},
            )
        return result

    def _book_with_retry(
        self,
        conn: PgConnection,
        room_id: int,
        check_in: date,
        check_out: date,
        log_fields: dict,
    ) -> BookingResult:
        for attempt in range(1, self.max_attempts + 1):
            try:
                reservation_id = self._attempt(conn, room_id, check_in, check_out)
            except BookingError as exc:
                return BookingResult.failed(exc)
            except psycopg2.Error as exc:
                if not is_write_conflict(exc):
                    logger.error(
                        "booking failed on store error",
                        exc_info=True,
                        extra={"extra_fields": {**log_fields, "attempt": attempt}},
                    )
                    raise StoreUnavailableError("reservation store unavailable") from exc
                logger.warning(
                    "booking write conflict",
                    extra={
                        "extra_fields": {
                            **log_fields,
                            "attempt": attempt,
                            "max_attempts": self.max_attempts,
                            "error": type(exc).__name__,
                        }
                    },
                )
                continue
            return BookingResult.booked(reservation_id)

        return BookingResult.failed(ConcurrencyExhaustedError(room_id, self.max_attempts))

    def _attempt(
        self,
        conn: PgConnection,
        room_id: int,
        check_in: date,
        check_out: date,
    ) -> int:
        # txn rolls back on every exception, so a failed attempt leaves no rows.
        with txn(conn) as cur:
            if self.rooms.get_room(cur, room_id) is None:
                raise RoomNotFoundError(room_id)
            self.reservations.assert_no_overlap(
                cur, room_id=room_id, check_in=check_in, check_out=check_out
            )
            return self.reservations.insert_reservation(
                cur, room_id=room_id, check_in=check_in, check_out=check_out
            )
