"""
Catalog endpoints: stadiums, their stands and the stands' seats.
Reads are public; writes require an admin.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.security import AuthContext, require_admin
from cricket_tickets.db.session import get_db
from cricket_tickets.schemas.venue import (
    BulkSeatCreate,
    BulkSeatResult,
    SeatCreate,
    SeatResponse,
    SeatUpdate,
    StadiumCreate,
    StadiumResponse,
    StadiumUpdate,
    StandCreate,
    StandResponse,
    StandUpdate,
)
from cricket_tickets.services import catalog_service
from cricket_tickets.services.seat_generation_service import generate_seats

router = APIRouter(tags=["Catalog"])


# Stadiums

@router.post("/stadiums", response_model=StadiumResponse, status_code=status.HTTP_201_CREATED)
async def create_stadium(
    data: StadiumCreate,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog_service.create_stadium(db, data)


@router.get("/stadiums", response_model=list[StadiumResponse])
async def list_stadiums(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_stadiums(db)


@router.get("/stadiums/{stadium_id}", response_model=StadiumResponse)
async def get_stadium(stadium_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_stadium(db, stadium_id)


@router.patch("/stadiums/{stadium_id}", response_model=StadiumResponse)
async def update_stadium(
    stadium_id: str,
    data: StadiumUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog_service.update_stadium(db, stadium_id, data)


@router.delete("/stadiums/{stadium_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stadium(
    stadium_id: str,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Rejected with 409 while the stadium still has stands or matches."""
    await catalog_service.delete_stadium(db, stadium_id)


# Stands

@router.post(
    "/stadiums/{stadium_id}/stands",
    response_model=StandResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_stand(
    stadium_id: str,
    data: StandCreate,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog_service.create_stand(db, stadium_id, data)


@router.get("/stadiums/{stadium_id}/stands", response_model=list[StandResponse])
async def list_stands(stadium_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_stands(db, stadium_id)


@router.get("/stands/{stand_id}", response_model=StandResponse)
async def get_stand(stand_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_stand(db, stand_id)


@router.patch("/stands/{stand_id}", response_model=StandResponse)
async def update_stand(
    stand_id: str,
    data: StandUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog_service.update_stand(db, stand_id, data)


@router.delete("/stands/{stand_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stand(
    stand_id: str,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await catalog_service.delete_stand(db, stand_id)


# Seats

@router.post(
    "/stands/{stand_id}/seats",
    response_model=SeatResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_seat(
    stand_id: str,
    data: SeatCreate,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog_service.create_seat(db, stand_id, data)


@router.post(
    "/stands/{stand_id}/seats/bulk",
    response_model=BulkSeatResult,
    status_code=status.HTTP_201_CREATED,
)
async def create_seats_bulk(
    stand_id: str,
    data: BulkSeatCreate,
    response: Response,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Generate a grid of seats. Batches are committed one by one; if a batch
    fails the seats from earlier batches stay and the response is a 207 with
    the error and the number actually created.
    """
    result = await generate_seats(db, stand_id, data)
    if result.error is not None:
        response.status_code = status.HTTP_207_MULTI_STATUS
    return result


@router.get("/stands/{stand_id}/seats", response_model=list[SeatResponse])
async def list_seats(stand_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_seats(db, stand_id)


@router.get("/seats/{seat_id}", response_model=SeatResponse)
async def get_seat(seat_id: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_seat(db, seat_id)


@router.patch("/seats/{seat_id}", response_model=SeatResponse)
async def update_seat(
    seat_id: str,
    data: SeatUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog_service.update_seat(db, seat_id, data)


@router.delete("/seats/{seat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_seat(
    seat_id: str,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Rejected with 409 once the seat has been booked for any match."""
    await catalog_service.delete_seat(db, seat_id)
