"""
Pydantic schemas for stadiums, stands and seats.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

SeatStatus = Literal["available", "blocked", "maintenance"]
Money = Decimal


class StadiumCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., gt=0)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1024)


class StadiumUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, gt=0)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1024)


class StadiumResponse(BaseModel):
    id: str
    name: str
    location: str
    capacity: int
    description: Optional[str]
    image_url: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class StandCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(..., gt=0)
    base_price: Money = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None


class StandUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    capacity: Optional[int] = Field(None, gt=0)
    base_price: Optional[Money] = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None


class StandResponse(BaseModel):
    id: str
    stadium_id: str
    name: str
    category: str
    capacity: int
    base_price: Money
    description: Optional[str]

    model_config = {"from_attributes": True}


class SeatCreate(BaseModel):
    row_number: str = Field(..., min_length=1, max_length=20)
    seat_number: str = Field(..., min_length=1, max_length=20)
    status: SeatStatus = "available"


class SeatUpdate(BaseModel):
    row_number: Optional[str] = Field(None, min_length=1, max_length=20)
    seat_number: Optional[str] = Field(None, min_length=1, max_length=20)
    status: Optional[SeatStatus] = None


class SeatResponse(BaseModel):
    id: str
    stand_id: str
    row_number: str
    seat_number: str
    status: str

    model_config = {"from_attributes": True}


class BulkSeatCreate(BaseModel):
    # Row bounds arrive as operator-typed text; the service parses and validates them.
    row_prefix: str = Field("", max_length=10)
    start_row: Union[int, str]
    end_row: Union[int, str]
    seats_per_row: Union[int, str]
    status: SeatStatus = "available"


class BulkSeatResult(BaseModel):
    requested: int
    created: int
    error: Optional[str] = None
