from typing import Optional

from sqlalchemy import delete, exists, select, update

from cricket_tickets.db.upsert import insert_if_absent
from cricket_tickets.models.booking import Booking
from cricket_tickets.models.match import Match, MatchSeat
from cricket_tickets.models.venue import Seat
from cricket_tickets.repositories.base import Repository


class MatchRepository(Repository[Match]):
    model = Match

    async def list(self, status: Optional[str] = None, newest_first: bool = False) -> list[Match]:
        stmt = select(Match)
        if status is not None:
            stmt = stmt.where(Match.status == status)
        order = Match.match_date.desc() if newest_first else Match.match_date.asc()
        stmt = stmt.order_by(order)
        return list((await self.db.execute(stmt)).scalars().all())

    async def has_bookings(self, match_id: str) -> bool:
        stmt = select(exists().where(Booking.match_id == match_id))
        return bool((await self.db.execute(stmt)).scalar())

    async def clear_match_seats(self, match_id: str) -> None:
        await self.db.execute(delete(MatchSeat).where(MatchSeat.match_id == match_id))

    async def delete_with_match_seats(self, match: Match) -> None:
        await self.clear_match_seats(match.id)
        await self.delete(match)


class MatchSeatRepository(Repository[MatchSeat]):
    model = MatchSeat

    async def get_for_seat(self, match_id: str, seat_id: str) -> Optional[MatchSeat]:
        stmt = select(MatchSeat).where(
            MatchSeat.match_id == match_id,
            MatchSeat.seat_id == seat_id,
        ).execution_options(populate_existing=True)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def list_for_stand(self, match_id: str, stand_id: str) -> dict[str, MatchSeat]:
        """Persisted match seats of one stand, keyed by seat_id."""
        stmt = (
            select(MatchSeat)
            .join(Seat, Seat.id == MatchSeat.seat_id)
            .where(MatchSeat.match_id == match_id, Seat.stand_id == stand_id)
            .execution_options(populate_existing=True)
        )
        rows = (await self.db.execute(stmt)).scalars().all()
        return {row.seat_id: row for row in rows}

    async def insert_if_absent(self, values: dict) -> bool:
        return await insert_if_absent(self.db, MatchSeat, values, ["match_id", "seat_id"])

    async def transition_status(self, match_seat_id: str, from_status: str, to_status: str) -> bool:
        """
        Compare-and-set on status. Returns False when the row was not in
        from_status, i.e. another transaction got there first.
        """
        result = await self.db.execute(
            update(MatchSeat)
            .where(MatchSeat.id == match_seat_id, MatchSeat.status == from_status)
            .values(status=to_status, version=MatchSeat.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def set_price_and_status(self, match_id: str, seat_id: str, price, status: str, protected_status: str) -> bool:
        """
        Write price and status unless the row is in protected_status.
        Returns False when the row was protected (or missing).
        """
        result = await self.db.execute(
            update(MatchSeat)
            .where(
                MatchSeat.match_id == match_id,
                MatchSeat.seat_id == seat_id,
                MatchSeat.status != protected_status,
            )
            .values(price=price, status=status, version=MatchSeat.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def set_price(self, match_id: str, seat_id: str, price) -> bool:
        result = await self.db.execute(
            update(MatchSeat)
            .where(MatchSeat.match_id == match_id, MatchSeat.seat_id == seat_id)
            .values(price=price)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
