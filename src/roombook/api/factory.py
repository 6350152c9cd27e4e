"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response

from roombook.domain.booking import get_max_attempts
from roombook.observability.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

from .routers import public
from .routes import bookings, rooms


def create_app() -> FastAPI:
    """Create the FastAPI app with health, booking and room routes.

    Raises:
        ValueError: If BOOKING_MAX_ATTEMPTS is set but not a positive integer.
    """
    app = FastAPI(
        title="roombook",
        docs_url=None,
        redoc_url=None,
    )
    # Read once so a bad value fails startup instead of every booking request.
    app.state.booking_max_attempts = get_max_attempts()

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    app.include_router(public.router)
    app.include_router(bookings.router)
    app.include_router(rooms.router)

    return app
