"""Rooms read endpoint.

GET /api/rooms/{room_id}/reservations                     -> all, ordered by check-in
GET /api/rooms/{room_id}/reservations?checkIn=..&checkOut=.. -> only those overlapping the window
"""

from __future__ import annotations

from datetime import date

import psycopg2
from fastapi import APIRouter, HTTPException, Path, Query
from pydantic import BaseModel, ConfigDict

from roombook.domain.errors import InvalidRangeError
from roombook.domain.room_conflict import ranges_overlap, validate_stay
from roombook.infra.db import txn
from roombook.infra.repositories.reservations_repository import (
    ReservationsRepository,
)
from roombook.infra.repositories.rooms_repository import RoomsRepository
from roombook.observability.logging import get_logger

router = APIRouter(prefix="/api/rooms", tags=["rooms"])

logger = get_logger(__name__)

_rooms = RoomsRepository()
_reservations = ReservationsRepository()


class ReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    room_id: int
    check_in: date
    check_out: date


@router.get("/{room_id}/reservations", response_model=list[ReservationResponse])
def list_room_reservations(
    room_id: int = Path(..., description="Room ID"),
    check_in: date | None = Query(None, alias="checkIn"),
    check_out: date | None = Query(None, alias="checkOut"),
) -> list[ReservationResponse]:
    """List the reservations held against a room.

    With checkIn and checkOut, only reservations overlapping
    [checkIn, checkOut) are returned; both must be given together.

    Returns 400 on a bad window, 404 if the room does not exist, 503 if the
    store is unreachable or not configured.
    """
    if (check_in is None) != (check_out is None):
        raise HTTPException(status_code=400, detail="checkIn and checkOut must be given together")
    if check_in is not None:
        try:
            validate_stay(check_in, check_out)
        except InvalidRangeError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    try:
        with txn() as cur:
            if _rooms.get_room(cur, room_id) is None:
                raise HTTPException(status_code=404, detail="Room not found")
            reservations = _reservations.list_for_room(cur, room_id)
    except (psycopg2.Error, RuntimeError):
        logger.error(
            "room reservations lookup failed",
            exc_info=True,
            extra={"extra_fields": {"room_id": room_id}},
        )
        raise HTTPException(status_code=503, detail="Service temporarily unavailable")

    if check_in is not None:
        reservations = [
            r for r in reservations
            if ranges_overlap(r.check_in, r.check_out, check_in, check_out)
        ]

    return [ReservationResponse.model_validate(r) for r in reservations]
