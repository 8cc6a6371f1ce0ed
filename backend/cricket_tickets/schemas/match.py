"""
Pydantic schemas for matches, seat maps and per-match pricing.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

MatchStatus = Literal["upcoming", "ongoing", "completed", "cancelled"]
OperatorSeatStatus = Literal["available", "blocked", "maintenance"]


class MatchCreate(BaseModel):
    stadium_id: str
    team_a: str = Field(..., min_length=1, max_length=255)
    team_b: str = Field(..., min_length=1, max_length=255)
    match_date: datetime
    description: Optional[str] = None
    status: MatchStatus = "upcoming"


class MatchUpdate(BaseModel):
    stadium_id: Optional[str] = None
    team_a: Optional[str] = Field(None, min_length=1, max_length=255)
    team_b: Optional[str] = Field(None, min_length=1, max_length=255)
    match_date: Optional[datetime] = None
    description: Optional[str] = None
    status: Optional[MatchStatus] = None


class MatchResponse(BaseModel):
    id: str
    stadium_id: str
    team_a: str
    team_b: str
    match_date: datetime
    description: Optional[str]
    status: str

    model_config = {"from_attributes": True}


class MatchListResponse(BaseModel):
    matches: list[MatchResponse]
    total: int
    cached: bool = False


class SeatState(BaseModel):
    """One seat as seen for one match."""

    seat_id: str
    match_seat_id: Optional[str]
    row_number: str
    seat_number: str
    price: Decimal
    status: str


class SeatRow(BaseModel):
    row_number: str
    seats: list[SeatState]


class SeatMapResponse(BaseModel):
    match_id: str
    stand_id: str
    stand_name: str
    base_price: Decimal
    rows: list[SeatRow]


class PricingEntry(BaseModel):
    seat_id: str
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: OperatorSeatStatus = "available"


class PricingSave(BaseModel):
    entries: list[PricingEntry]


class SeatPriceEdit(BaseModel):
    # Loosely typed on purpose: bad input must reach the pricer and be rejected there.
    price: Optional[Decimal | float | str] = None
    status: Optional[OperatorSeatStatus] = None


class PriceMultiplier(BaseModel):
    multiplier: Decimal = Field(..., gt=0)


class PricingRowResult(BaseModel):
    seat_id: str
    action: Literal["created", "updated"]


class PricingSaveResponse(BaseModel):
    results: list[PricingRowResult]
    seat_map: SeatMapResponse
