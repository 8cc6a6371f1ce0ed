"""
Availability view: a stand's seats as they stand for one match.

A seat with no match_seats row for the match is shown at the stand's base
price with the physical seat's own status. That default is computed here on
every read and never written back.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.exceptions import NotFoundError
from cricket_tickets.models.match import Match, MatchSeat
from cricket_tickets.models.venue import Seat, Stand
from cricket_tickets.repositories import MatchSeatRepository, SeatRepository, StandRepository
from cricket_tickets.schemas.match import SeatMapResponse, SeatRow, SeatState
from cricket_tickets.services.match_service import get_match


@dataclass(frozen=True)
class EffectiveSeatState:
    price: Decimal
    status: str
    match_seat_id: Optional[str] = None


def effective_seat_state(seat: Seat, stand: Stand, match_seat: Optional[MatchSeat]) -> EffectiveSeatState:
    if match_seat is not None:
        return EffectiveSeatState(
            price=match_seat.price,
            status=match_seat.status,
            match_seat_id=match_seat.id,
        )
    return EffectiveSeatState(price=stand.base_price, status=seat.status)


async def get_stand_for_match(db: AsyncSession, match_id: str, stand_id: str) -> tuple[Match, Stand]:
    """Load the match and one of its stadium's stands."""
    match = await get_match(db, match_id)
    stand = await StandRepository(db).get(stand_id)
    if not stand or stand.stadium_id != match.stadium_id:
        raise NotFoundError(f"Stand {stand_id} not found for match {match_id}")
    return match, stand


async def list_match_stands(db: AsyncSession, match_id: str) -> list[Stand]:
    match = await get_match(db, match_id)
    return await StandRepository(db).list_by_stadium(match.stadium_id)


async def load_seat_states(db: AsyncSession, match_id: str, stand: Stand) -> list[SeatState]:
    seats = await SeatRepository(db).list_by_stand(stand.id)
    persisted = await MatchSeatRepository(db).list_for_stand(match_id, stand.id)
    states = []
    for seat in seats:
        state = effective_seat_state(seat, stand, persisted.get(seat.id))
        states.append(
            SeatState(
                seat_id=seat.id,
                match_seat_id=state.match_seat_id,
                row_number=seat.row_number,
                seat_number=seat.seat_number,
                price=state.price,
                status=state.status,
            )
        )
    return states


def group_by_row(states: list[SeatState]) -> list[SeatRow]:
    rows: dict[str, list[SeatState]] = {}
    for state in states:
        rows.setdefault(state.row_number, []).append(state)
    return [SeatRow(row_number=row, seats=seats) for row, seats in rows.items()]


async def get_seat_map(db: AsyncSession, match_id: str, stand_id: str) -> SeatMapResponse:
    """Fresh read of the stand's seat map for the match. Never cached."""
    match, stand = await get_stand_for_match(db, match_id, stand_id)
    states = await load_seat_states(db, match.id, stand)
    return SeatMapResponse(
        match_id=match.id,
        stand_id=stand.id,
        stand_name=stand.name,
        base_price=stand.base_price,
        rows=group_by_row(states),
    )


async def get_seat_map_for_seat(db: AsyncSession, match_id: str, seat_id: str) -> SeatMapResponse:
    """Seat map of the stand a seat belongs to."""
    seat = await SeatRepository(db).get(seat_id)
    if not seat:
        raise NotFoundError(f"Seat {seat_id} not found")
    return await get_seat_map(db, match_id, seat.stand_id)


async def get_seat_map_for_match_seat(db: AsyncSession, match_seat_id: str) -> SeatMapResponse:
    match_seat = await MatchSeatRepository(db).get(match_seat_id)
    if not match_seat:
        raise NotFoundError(f"Match seat {match_seat_id} not found")
    return await get_seat_map_for_seat(db, match_seat.match_id, match_seat.seat_id)
