"""
Booking endpoints with concurrency-safe seat reservation.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.exceptions import SeatUnavailableError
from cricket_tickets.core.security import AuthContext, get_auth_context
from cricket_tickets.db.session import get_db
from cricket_tickets.schemas.booking import (
    BookingAttemptResponse,
    BookingCancelResponse,
    BookingCreate,
    BookingDetail,
    BookingResponse,
)
from cricket_tickets.services.availability_service import get_seat_map, get_seat_map_for_match_seat
from cricket_tickets.services.booking_service import book_seat, cancel_booking
from cricket_tickets.services.ledger_service import get_all_bookings, get_user_bookings

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post(
    "",
    response_model=BookingAttemptResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"description": "Seat taken or match closed; body carries the refreshed seat map"}},
)
async def create_booking(
    booking_data: BookingCreate,
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Book one seat for one match.

    The seat is taken with a single conditional update, so when several
    users race for it exactly one wins. Losers get a 409 together with the
    stand's current seat map so they can pick again.
    """
    try:
        booking = await book_seat(
            db,
            ctx,
            match_seat_id=booking_data.match_seat_id,
            match_id=booking_data.match_id,
            seat_id=booking_data.seat_id,
        )
    except SeatUnavailableError as e:
        body = {"detail": e.message}
        if e.match_id is not None and e.stand_id is not None:
            seat_map = await get_seat_map(db, e.match_id, e.stand_id)
            body["seat_map"] = seat_map.model_dump(mode="json")
        return JSONResponse(status_code=e.status_code, content=body)

    seat_map = await get_seat_map_for_match_seat(db, booking.match_seat_id)
    return BookingAttemptResponse(
        booking=BookingResponse.model_validate(booking),
        seat_map=seat_map,
    )


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking_endpoint(
    booking_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking and release its seat for resale."""
    booking = await cancel_booking(db, ctx, booking_id)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.booking_status,
    )


@router.get("", response_model=list[BookingDetail])
async def list_user_bookings(
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Bookings of the signed-in user, newest first."""
    return await get_user_bookings(db, ctx)


@router.get("/all", response_model=list[BookingDetail])
async def list_all_bookings(
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Every booking, newest first. Admin only."""
    return await get_all_bookings(db, ctx)
