"""
Booking ledger: bookings with their match, seat and venue, newest first.
Cancelled bookings stay in the ledger. Every call is a fresh read.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.security import AuthContext
from cricket_tickets.repositories import BookingRepository
from cricket_tickets.schemas.booking import BookingDetail


async def get_user_bookings(db: AsyncSession, ctx: AuthContext) -> list[BookingDetail]:
    """Bookings of the calling user."""
    user_id = ctx.require_user()
    rows = await BookingRepository(db).list_with_details(user_id=user_id)
    return [BookingDetail.model_validate(dict(row)) for row in rows]


async def get_all_bookings(db: AsyncSession, ctx: AuthContext) -> list[BookingDetail]:
    """Every user's bookings. Admin only."""
    ctx.require_admin()
    rows = await BookingRepository(db).list_with_details()
    return [BookingDetail.model_validate(dict(row)) for row in rows]
