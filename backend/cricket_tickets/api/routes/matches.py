"""
Match endpoints: match CRUD with Redis caching on the public listing,
per-match seat maps and the admin pricing screens.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.logging import get_logger
from cricket_tickets.core.security import AuthContext, require_admin
from cricket_tickets.db.session import get_db
from cricket_tickets.schemas.match import (
    MatchCreate,
    MatchListResponse,
    MatchResponse,
    MatchStatus,
    MatchUpdate,
    PriceMultiplier,
    PricingSave,
    PricingSaveResponse,
    SeatMapResponse,
    SeatPriceEdit,
)
from cricket_tickets.schemas.venue import StandResponse
from cricket_tickets.services import match_service, pricing_service
from cricket_tickets.services.availability_service import (
    get_seat_map,
    get_seat_map_for_seat,
    list_match_stands,
)
from cricket_tickets.services.cache_service import (
    get_cached_matches,
    invalidate_match_cache,
    set_cached_matches,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/matches", tags=["Matches"])


@router.post("", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
async def create_match(
    data: MatchCreate,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    match = await match_service.create_match(db, data)
    await invalidate_match_cache()
    return match


@router.get("", response_model=MatchListResponse)
async def list_matches(
    status: Optional[MatchStatus] = Query("upcoming"),
    db: AsyncSession = Depends(get_db),
):
    """
    Public listing, soonest first. Cached in Redis per status filter and
    invalidated whenever a match is written.
    """
    cached = await get_cached_matches(status)
    if cached:
        logger.info("matches_list_cache_hit", status=status)
        cached["cached"] = True
        return MatchListResponse(**cached)

    matches = await match_service.list_matches(db, status=status)
    response_data = {
        "matches": [MatchResponse.model_validate(m).model_dump(mode="json") for m in matches],
        "total": len(matches),
        "cached": False,
    }
    await set_cached_matches(status, response_data)
    return MatchListResponse(**response_data)


@router.get("/all", response_model=list[MatchResponse])
async def list_all_matches(
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Every match, most recent first. Admin only, never cached."""
    return await match_service.list_matches(db, newest_first=True)


@router.get("/{match_id}", response_model=MatchResponse)
async def get_match(match_id: str, db: AsyncSession = Depends(get_db)):
    return await match_service.get_match(db, match_id)


@router.patch("/{match_id}", response_model=MatchResponse)
async def update_match(
    match_id: str,
    data: MatchUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    match = await match_service.update_match(db, match_id, data)
    await invalidate_match_cache()
    return match


@router.delete("/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_match(
    match_id: str,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await match_service.delete_match(db, match_id)
    await invalidate_match_cache()


# Availability

@router.get("/{match_id}/stands", response_model=list[StandResponse])
async def match_stands(match_id: str, db: AsyncSession = Depends(get_db)):
    return await list_match_stands(db, match_id)


@router.get("/{match_id}/stands/{stand_id}/seats", response_model=SeatMapResponse)
async def seat_map(match_id: str, stand_id: str, db: AsyncSession = Depends(get_db)):
    """Seats of one stand for this match. Always read fresh."""
    return await get_seat_map(db, match_id, stand_id)


# Pricing

@router.get("/{match_id}/stands/{stand_id}/pricing", response_model=SeatMapResponse)
async def pricing_sheet(
    match_id: str,
    stand_id: str,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await get_seat_map(db, match_id, stand_id)


@router.put("/{match_id}/stands/{stand_id}/pricing", response_model=PricingSaveResponse)
async def save_pricing(
    match_id: str,
    stand_id: str,
    data: PricingSave,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Upsert every entry. Nothing is written if any entry is rejected."""
    results = await pricing_service.save_pricing(db, match_id, stand_id, data.entries)
    return PricingSaveResponse(results=results, seat_map=await get_seat_map(db, match_id, stand_id))


@router.post(
    "/{match_id}/stands/{stand_id}/pricing/multiplier",
    response_model=PricingSaveResponse,
)
async def apply_multiplier(
    match_id: str,
    stand_id: str,
    data: PriceMultiplier,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    results = await pricing_service.apply_price_multiplier(db, match_id, stand_id, data.multiplier)
    return PricingSaveResponse(results=results, seat_map=await get_seat_map(db, match_id, stand_id))


@router.patch("/{match_id}/seats/{seat_id}", response_model=PricingSaveResponse)
async def edit_seat(
    match_id: str,
    seat_id: str,
    data: SeatPriceEdit,
    ctx: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await pricing_service.edit_seat(db, match_id, seat_id, price=data.price, status=data.status)
    return PricingSaveResponse(results=[result], seat_map=await get_seat_map_for_seat(db, match_id, seat_id))
