"""Bookings endpoint.

POST /api/bookings/book?roomId=...&checkIn=YYYY-MM-DD&checkOut=YYYY-MM-DD

Responses are plain text:
    200 Room booked successfully
    400 check-in not before check-out
    404 room not found
    409 dates already booked, or retries exhausted under contention
    503 reservation store unavailable
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from roombook.domain.booking import BookingService
from roombook.domain.errors import BookingOutcome, StoreUnavailableError
from roombook.infra.repositories.reservations_repository import (
    ReservationsRepository,
)
from roombook.infra.repositories.rooms_repository import RoomsRepository

router = APIRouter(prefix="/api/bookings", tags=["bookings"])

_STATUS_BY_OUTCOME = {
    BookingOutcome.BOOKED: 200,
    BookingOutcome.INVALID_RANGE: 400,
    BookingOutcome.ROOM_NOT_FOUND: 404,
    BookingOutcome.DATE_CONFLICT: 409,
    BookingOutcome.CONCURRENCY_EXHAUSTED: 409,
}


def get_booking_service(request: Request) -> BookingService:
    """Build the booking service (overridable in tests via dependency_overrides)."""
    return BookingService(
        RoomsRepository(),
        ReservationsRepository(),
        max_attempts=request.app.state.booking_max_attempts,
    )


@router.post("/book", response_class=PlainTextResponse)
def book_room(
    room_id: int = Query(..., alias="roomId"),
    check_in: date = Query(..., alias="checkIn"),
    check_out: date = Query(..., alias="checkOut"),
    service: BookingService = Depends(get_booking_service),
) -> PlainTextResponse:
    """Book a room for [checkIn, checkOut).

    Runs in FastAPI's threadpool; the booking blocks on the database only.
    """
    try:
        result = service.book_room(room_id, check_in, check_out)
    except StoreUnavailableError:
        # Already logged with traceback by the service.
        return PlainTextResponse("Service temporarily unavailable", status_code=503)

    return PlainTextResponse(result.message, status_code=_STATUS_BY_OUTCOME[result.outcome])
