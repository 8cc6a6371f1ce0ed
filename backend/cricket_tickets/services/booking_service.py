"""
Booking service with concurrency-safe seat reservation.

CONCURRENCY STRATEGY: Compare-and-set on the match seat
=======================================================

Problem:
  Two fans look at the same seat map. Both see seat A1 as available, both
  press "book". A naive read-then-insert creates two bookings for one seat.

Solution:
  The seat flip is a single conditional UPDATE:

    UPDATE match_seats SET status = 'booked', version = version + 1
    WHERE id = :match_seat_id AND status = 'available'

  The store serializes writers on the row. Exactly one transaction sees
  rowcount == 1; every other one sees 0 and is told the seat is gone. The
  booking row is inserted in the same transaction as the flip, so a failure
  after the flip leaves neither.

  Safety net: a partial unique index on bookings(match_seat_id) WHERE
  booking_status = 'confirmed'. Even a code path that skipped the flip could
  not create a second confirmed booking for the seat.

Cancellation releases the seat with the reverse compare-and-set
(booked -> available) in the same transaction as the status change.

There is no hold/lock timer: the seat is only taken at the moment of booking.
Payment is recorded as completed but not processed.
"""

import secrets
import string
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    SeatUnavailableError,
    ValidationFailedError,
)
from cricket_tickets.core.logging import get_logger
from cricket_tickets.core.metrics import booking_cancellations, booking_latency, record_booking_attempt
from cricket_tickets.core.security import AuthContext
from cricket_tickets.db.base import new_id
from cricket_tickets.models.booking import (
    BOOKING_CANCELLED,
    BOOKING_CONFIRMED,
    PAYMENT_COMPLETED,
    PAYMENT_REFUNDED,
    Booking,
)
from cricket_tickets.models.match import (
    BOOKABLE_MATCH_STATUSES,
    MATCH_SEAT_AVAILABLE,
    MATCH_SEAT_BOOKED,
    Match,
    MatchSeat,
)
from cricket_tickets.models.venue import SEAT_AVAILABLE
from cricket_tickets.repositories import (
    BookingRepository,
    MatchSeatRepository,
    SeatRepository,
    StandRepository,
)
from cricket_tickets.services.match_service import get_match

logger = get_logger(__name__)

TICKET_CODE_ALPHABET = string.ascii_uppercase + string.digits
TICKET_CODE_LENGTH = 8

SEAT_TAKEN_MESSAGE = "Seat is no longer available. Please pick another seat."


def generate_ticket_code(length: int = TICKET_CODE_LENGTH) -> str:
    """Short human-readable reference. Not checked for uniqueness."""
    return "".join(secrets.choice(TICKET_CODE_ALPHABET) for _ in range(length))


def _ensure_open(match: Match, stand_id: Optional[str]) -> None:
    if match.status not in BOOKABLE_MATCH_STATUSES:
        raise SeatUnavailableError(
            f"Match is {match.status} and not open for booking", match_id=match.id, stand_id=stand_id
        )


async def _materialize_match_seat(db: AsyncSession, match_id: str, seat_id: str) -> MatchSeat:
    """
    Return the match seat for (match, seat), creating it at the effective
    default if the pricer never wrote one. Concurrent creators converge on
    the same row through the (match_id, seat_id) unique key.
    """
    match = await get_match(db, match_id)
    seat = await SeatRepository(db).get(seat_id)
    if not seat:
        raise NotFoundError(f"Seat {seat_id} not found")
    stand = await StandRepository(db).get(seat.stand_id)
    if not stand or stand.stadium_id != match.stadium_id:
        raise NotFoundError(f"Seat {seat_id} is not part of match {match_id}")
    _ensure_open(match, stand.id)

    match_seats = MatchSeatRepository(db)
    match_seat = await match_seats.get_for_seat(match_id, seat_id)
    if match_seat:
        return match_seat

    if seat.status != SEAT_AVAILABLE:
        raise SeatUnavailableError(SEAT_TAKEN_MESSAGE, match_id=match_id, stand_id=stand.id)

    await match_seats.insert_if_absent(
        {
            "id": new_id(),
            "match_id": match_id,
            "seat_id": seat_id,
            "price": stand.base_price,
            "status": MATCH_SEAT_AVAILABLE,
            "version": 1,
        }
    )
    return await match_seats.get_for_seat(match_id, seat_id)


async def _book(
    db: AsyncSession,
    user_id: str,
    match_seat_id: Optional[str],
    match_id: Optional[str],
    seat_id: Optional[str],
) -> Booking:
    match_seats = MatchSeatRepository(db)

    if match_seat_id is not None:
        match_seat = await match_seats.get(match_seat_id)
        if not match_seat:
            raise NotFoundError(f"Match seat {match_seat_id} not found")
    elif match_id is not None and seat_id is not None:
        match_seat = await _materialize_match_seat(db, match_id, seat_id)
    else:
        raise ValidationFailedError("Provide match_seat_id, or both match_id and seat_id")

    match = await get_match(db, match_seat.match_id)
    seat = await SeatRepository(db).get(match_seat.seat_id)
    stand_id = seat.stand_id if seat else None

    _ensure_open(match, stand_id)

    # The guard: only one transaction can move this row out of "available".
    flipped = await match_seats.transition_status(match_seat.id, MATCH_SEAT_AVAILABLE, MATCH_SEAT_BOOKED)
    if not flipped:
        logger.info(
            "booking_conflict",
            match_seat_id=match_seat.id,
            match_id=match.id,
            user_id=user_id,
            reason="seat_not_available",
        )
        raise SeatUnavailableError(SEAT_TAKEN_MESSAGE, match_id=match.id, stand_id=stand_id)

    # Price as of the flip, not as first read.
    await db.refresh(match_seat)
    match_seat_id, booked_match_id = match_seat.id, match.id

    booking = Booking(
        user_id=user_id,
        match_id=match.id,
        match_seat_id=match_seat.id,
        amount=match_seat.price,
        payment_status=PAYMENT_COMPLETED,
        booking_status=BOOKING_CONFIRMED,
        ticket_code=generate_ticket_code(),
    )
    try:
        booking = await BookingRepository(db).add(booking)
    except IntegrityError:
        # Rolls back the flip too; ORM objects are expired from here on.
        await db.rollback()
        logger.warning(
            "booking_conflict",
            match_seat_id=match_seat_id,
            match_id=booked_match_id,
            user_id=user_id,
            reason="confirmed_booking_exists",
        )
        raise SeatUnavailableError(SEAT_TAKEN_MESSAGE, match_id=booked_match_id, stand_id=stand_id) from None

    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user_id,
        match_id=match.id,
        match_seat_id=match_seat.id,
        amount=str(booking.amount),
        ticket_code=booking.ticket_code,
        seat_version=match_seat.version,
    )
    return booking


async def book_seat(
    db: AsyncSession,
    ctx: AuthContext,
    match_seat_id: Optional[str] = None,
    match_id: Optional[str] = None,
    seat_id: Optional[str] = None,
) -> Booking:
    """
    Reserve one seat for one match for the calling user.

    Raises NotAuthenticatedError for anonymous callers, SeatUnavailableError
    when the seat is already booked or blocked or the match is not open for
    booking. No booking row exists after any failure.
    """
    user_id = ctx.require_user()

    with booking_latency.time():
        try:
            booking = await _book(db, user_id, match_seat_id, match_id, seat_id)
        except ConflictError:
            record_booking_attempt("conflict")
            raise
        except (NotFoundError, ValidationFailedError, SQLAlchemyError):
            record_booking_attempt("error")
            raise

    record_booking_attempt("success")
    return booking


async def cancel_booking(db: AsyncSession, ctx: AuthContext, booking_id: str) -> Booking:
    """
    Cancel a confirmed booking and release its seat.
    Owners may cancel their own bookings; admins may cancel any.
    """
    user_id = ctx.require_user()
    bookings = BookingRepository(db)

    booking = await bookings.get(booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.user_id != user_id and not ctx.is_admin:
        raise ForbiddenError("You can only cancel your own bookings")

    cancelled = await bookings.transition_status(
        booking.id,
        BOOKING_CONFIRMED,
        BOOKING_CANCELLED,
        payment_status=PAYMENT_REFUNDED,
    )
    if not cancelled:
        raise ValidationFailedError("Booking is already cancelled")

    released = await MatchSeatRepository(db).transition_status(
        booking.match_seat_id, MATCH_SEAT_BOOKED, MATCH_SEAT_AVAILABLE
    )
    await db.refresh(booking)

    actor = "owner" if booking.user_id == user_id else "admin"
    booking_cancellations.labels(actor=actor).inc()
    logger.info(
        "booking_cancelled",
        booking_id=booking.id,
        cancelled_by=user_id,
        actor=actor,
        match_seat_id=booking.match_seat_id,
        seat_released=released,
    )
    return booking
