"""
Domain error taxonomy and the FastAPI handlers that render it.

Services raise these instead of HTTPException so they can be exercised
without a request. Every error carries the HTTP status it maps to.
"""

import asyncio

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cricket_tickets.core.logging import get_logger

logger = get_logger(__name__)


class CricketTicketsError(Exception):
    """Base class for all domain-level errors."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationFailedError(CricketTicketsError):
    """Input rejected before any write (bad bounds, negative price...)."""

    status_code = 400


class NotAuthenticatedError(CricketTicketsError):
    status_code = 401


class ForbiddenError(CricketTicketsError):
    status_code = 403


class NotFoundError(CricketTicketsError):
    status_code = 404


class ConflictError(CricketTicketsError):
    """State no longer permits the operation (dependents exist, wrong status)."""

    status_code = 409


class SeatUnavailableError(ConflictError):
    """The seat was taken or blocked before our write landed. Re-fetch and retry."""

    def __init__(self, message: str, match_id: str | None = None, stand_id: str | None = None):
        super().__init__(message)
        self.match_id = match_id
        self.stand_id = stand_id


class StoreUnavailableError(CricketTicketsError):
    """Transient failure of the backing store (network, timeout, pool exhausted)."""

    status_code = 503


STORE_UNAVAILABLE_MESSAGE = "Store temporarily unavailable, please retry"


async def domain_error_handler(request: Request, exc: CricketTicketsError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "store_error",
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=StoreUnavailableError.status_code,
        content={"detail": STORE_UNAVAILABLE_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CricketTicketsError, domain_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(asyncio.TimeoutError, store_error_handler)
