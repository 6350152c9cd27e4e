"""Room and reservation records as read from the store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Room:
    id: int
    room_number: str
    available: bool


@dataclass(frozen=True)
class Reservation:
    """A persisted reservation.

    version is the optimistic-concurrency counter maintained by the store;
    it is not part of the API representation.
    """

    id: int
    room_id: int
    check_in: date
    check_out: date
    version: int = 0
