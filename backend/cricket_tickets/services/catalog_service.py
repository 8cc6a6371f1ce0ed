"""
Catalog service: stadiums, stands and seats.

Writes are admin-only; the routes enforce that through require_admin.
Deletes follow a RESTRICT policy: a parent with dependents is never removed,
and a seat that is (or ever was) booked is never removed.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.exceptions import ConflictError, NotFoundError
from cricket_tickets.core.logging import get_logger
from cricket_tickets.models.venue import Seat, Stadium, Stand
from cricket_tickets.repositories import SeatRepository, StadiumRepository, StandRepository
from cricket_tickets.schemas.venue import (
    SeatCreate,
    SeatUpdate,
    StadiumCreate,
    StadiumUpdate,
    StandCreate,
    StandUpdate,
)

logger = get_logger(__name__)


# -----------------------------
# Stadiums
# -----------------------------
async def create_stadium(db: AsyncSession, data: StadiumCreate) -> Stadium:
    stadium = await StadiumRepository(db).add(Stadium(**data.model_dump()))
    logger.info("stadium_created", stadium_id=stadium.id, name=stadium.name)
    return stadium


async def get_stadium(db: AsyncSession, stadium_id: str) -> Stadium:
    stadium = await StadiumRepository(db).get(stadium_id)
    if not stadium:
        raise NotFoundError(f"Stadium {stadium_id} not found")
    return stadium


async def list_stadiums(db: AsyncSession) -> list[Stadium]:
    return await StadiumRepository(db).list()


async def update_stadium(db: AsyncSession, stadium_id: str, data: StadiumUpdate) -> Stadium:
    stadium = await get_stadium(db, stadium_id)
    stadium = await StadiumRepository(db).update(stadium, data.model_dump(exclude_unset=True))
    logger.info("stadium_updated", stadium_id=stadium.id)
    return stadium


async def delete_stadium(db: AsyncSession, stadium_id: str) -> None:
    stadiums = StadiumRepository(db)
    stadium = await get_stadium(db, stadium_id)
    if await stadiums.has_dependents(stadium_id):
        raise ConflictError("Stadium still has stands or matches; remove them first")
    await stadiums.delete(stadium)
    logger.info("stadium_deleted", stadium_id=stadium_id)


# -----------------------------
# Stands
# -----------------------------
async def create_stand(db: AsyncSession, stadium_id: str, data: StandCreate) -> Stand:
    await get_stadium(db, stadium_id)
    stand = await StandRepository(db).add(Stand(stadium_id=stadium_id, **data.model_dump()))
    logger.info("stand_created", stand_id=stand.id, stadium_id=stadium_id, base_price=str(stand.base_price))
    return stand


async def get_stand(db: AsyncSession, stand_id: str) -> Stand:
    stand = await StandRepository(db).get(stand_id)
    if not stand:
        raise NotFoundError(f"Stand {stand_id} not found")
    return stand


async def list_stands(db: AsyncSession, stadium_id: str) -> list[Stand]:
    await get_stadium(db, stadium_id)
    return await StandRepository(db).list_by_stadium(stadium_id)


async def update_stand(db: AsyncSession, stand_id: str, data: StandUpdate) -> Stand:
    stand = await get_stand(db, stand_id)
    stand = await StandRepository(db).update(stand, data.model_dump(exclude_unset=True))
    logger.info("stand_updated", stand_id=stand.id)
    return stand


async def delete_stand(db: AsyncSession, stand_id: str) -> None:
    stands = StandRepository(db)
    stand = await get_stand(db, stand_id)
    if await stands.has_seats(stand_id):
        raise ConflictError("Stand still has seats; remove them first")
    await stands.delete(stand)
    logger.info("stand_deleted", stand_id=stand_id)


# -----------------------------
# Seats
# -----------------------------
async def create_seat(db: AsyncSession, stand_id: str, data: SeatCreate) -> Seat:
    await get_stand(db, stand_id)
    seat = await SeatRepository(db).add(Seat(stand_id=stand_id, **data.model_dump()))
    logger.info("seat_created", seat_id=seat.id, stand_id=stand_id, row=seat.row_number, seat=seat.seat_number)
    return seat


async def get_seat(db: AsyncSession, seat_id: str) -> Seat:
    seat = await SeatRepository(db).get(seat_id)
    if not seat:
        raise NotFoundError(f"Seat {seat_id} not found")
    return seat


async def list_seats(db: AsyncSession, stand_id: str) -> list[Seat]:
    await get_stand(db, stand_id)
    return await SeatRepository(db).list_by_stand(stand_id)


async def update_seat(db: AsyncSession, seat_id: str, data: SeatUpdate) -> Seat:
    seat = await get_seat(db, seat_id)
    return await SeatRepository(db).update(seat, data.model_dump(exclude_unset=True))


async def delete_seat(db: AsyncSession, seat_id: str) -> None:
    seats = SeatRepository(db)
    seat = await get_seat(db, seat_id)
    if await seats.is_taken(seat_id):
        raise ConflictError("Seat is booked for a match and cannot be deleted")
    await seats.delete_with_match_seats(seat)
    logger.info("seat_deleted", seat_id=seat_id)
