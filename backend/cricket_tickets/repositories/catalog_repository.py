from sqlalchemy import delete, exists, select

from cricket_tickets.models.booking import Booking
from cricket_tickets.models.match import MATCH_SEAT_BOOKED, Match, MatchSeat
from cricket_tickets.models.venue import Seat, Stadium, Stand
from cricket_tickets.repositories.base import Repository


class StadiumRepository(Repository[Stadium]):
    model = Stadium

    async def list(self) -> list[Stadium]:
        stmt = select(Stadium).order_by(Stadium.name.asc())
        return list((await self.db.execute(stmt)).scalars().all())

    async def has_dependents(self, stadium_id: str) -> bool:
        stmt = select(
            exists().where(Stand.stadium_id == stadium_id)
            | exists().where(Match.stadium_id == stadium_id)
        )
        return bool((await self.db.execute(stmt)).scalar())


class StandRepository(Repository[Stand]):
    model = Stand

    async def list_by_stadium(self, stadium_id: str) -> list[Stand]:
        stmt = (
            select(Stand)
            .where(Stand.stadium_id == stadium_id)
            .order_by(Stand.name.asc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def has_seats(self, stand_id: str) -> bool:
        stmt = select(exists().where(Seat.stand_id == stand_id))
        return bool((await self.db.execute(stmt)).scalar())


class SeatRepository(Repository[Seat]):
    model = Seat

    async def list_by_stand(self, stand_id: str) -> list[Seat]:
        stmt = (
            select(Seat)
            .where(Seat.stand_id == stand_id)
            .order_by(Seat.row_number.asc(), Seat.seat_number.asc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def is_taken(self, seat_id: str) -> bool:
        """True while any match has this seat booked or any booking points at it."""
        booked = exists().where(
            MatchSeat.seat_id == seat_id,
            MatchSeat.status == MATCH_SEAT_BOOKED,
        )
        referenced = exists().where(
            Booking.match_seat_id == MatchSeat.id,
            MatchSeat.seat_id == seat_id,
        )
        stmt = select(booked | referenced)
        return bool((await self.db.execute(stmt)).scalar())

    async def delete_with_match_seats(self, seat: Seat) -> None:
        await self.db.execute(delete(MatchSeat).where(MatchSeat.seat_id == seat.id))
        await self.delete(seat)
