from typing import Optional

from sqlalchemy import func, select, update

from cricket_tickets.models.booking import BOOKING_CONFIRMED, Booking
from cricket_tickets.models.match import Match, MatchSeat
from cricket_tickets.models.venue import Seat, Stadium, Stand
from cricket_tickets.repositories.base import Repository


class BookingRepository(Repository[Booking]):
    model = Booking

    async def count_confirmed_for_match_seat(self, match_seat_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Booking)
            .where(
                Booking.match_seat_id == match_seat_id,
                Booking.booking_status == BOOKING_CONFIRMED,
            )
        )
        return (await self.db.execute(stmt)).scalar_one()

    async def transition_status(
        self,
        booking_id: str,
        from_status: str,
        to_status: str,
        payment_status: Optional[str] = None,
    ) -> bool:
        values = {"booking_status": to_status}
        if payment_status is not None:
            values["payment_status"] = payment_status
        result = await self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.booking_status == from_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_with_details(self, user_id: Optional[str] = None) -> list:
        """
        Bookings joined with match, seat, stand and stadium, newest first.
        user_id=None returns every user's bookings.
        """
        stmt = (
            select(
                Booking.id,
                Booking.user_id,
                Booking.match_id,
                Booking.match_seat_id,
                Booking.booking_date,
                Booking.amount,
                Booking.payment_status,
                Booking.booking_status,
                Booking.ticket_code,
                Match.team_a,
                Match.team_b,
                Match.match_date,
                Match.status.label("match_status"),
                Seat.row_number,
                Seat.seat_number,
                Stand.name.label("stand_name"),
                Stadium.name.label("stadium_name"),
            )
            .join(Match, Match.id == Booking.match_id)
            .join(MatchSeat, MatchSeat.id == Booking.match_seat_id)
            .join(Seat, Seat.id == MatchSeat.seat_id)
            .join(Stand, Stand.id == Seat.stand_id)
            .join(Stadium, Stadium.id == Stand.stadium_id)
            .order_by(Booking.booking_date.desc())
        )
        if user_id is not None:
            stmt = stmt.where(Booking.user_id == user_id)
        return list((await self.db.execute(stmt)).mappings().all())
