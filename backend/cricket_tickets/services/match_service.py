"""
Match service handling CRUD operations.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.exceptions import ConflictError, NotFoundError
from cricket_tickets.core.logging import get_logger
from cricket_tickets.models.match import Match
from cricket_tickets.repositories import MatchRepository
from cricket_tickets.schemas.match import MatchCreate, MatchUpdate
from cricket_tickets.services.catalog_service import get_stadium

logger = get_logger(__name__)


async def create_match(db: AsyncSession, data: MatchCreate) -> Match:
    await get_stadium(db, data.stadium_id)
    match = await MatchRepository(db).add(Match(**data.model_dump()))
    logger.info(
        "match_created",
        match_id=match.id,
        stadium_id=match.stadium_id,
        teams=f"{match.team_a} vs {match.team_b}",
    )
    return match


async def get_match(db: AsyncSession, match_id: str) -> Match:
    match = await MatchRepository(db).get(match_id)
    if not match:
        raise NotFoundError(f"Match {match_id} not found")
    return match


async def list_matches(db: AsyncSession, status: Optional[str] = None, newest_first: bool = False) -> list[Match]:
    """
    Public listing is upcoming matches soonest first; the admin listing is
    every match, most recent first.
    """
    return await MatchRepository(db).list(status=status, newest_first=newest_first)


async def update_match(db: AsyncSession, match_id: str, data: MatchUpdate) -> Match:
    match = await get_match(db, match_id)
    values = data.model_dump(exclude_unset=True)
    if "stadium_id" in values and values["stadium_id"] != match.stadium_id:
        await get_stadium(db, values["stadium_id"])
        if await MatchRepository(db).has_bookings(match_id):
            raise ConflictError("Cannot move a match with bookings to another stadium")
        # Seat prices were set against the old stadium's stands
        await MatchRepository(db).clear_match_seats(match_id)
    match = await MatchRepository(db).update(match, values)
    logger.info("match_updated", match_id=match.id, status=match.status)
    return match


async def delete_match(db: AsyncSession, match_id: str) -> None:
    matches = MatchRepository(db)
    match = await get_match(db, match_id)
    if await matches.has_bookings(match_id):
        raise ConflictError("Match has bookings and cannot be deleted; cancel it instead")
    await matches.delete_with_match_seats(match)
    logger.info("match_deleted", match_id=match_id)
