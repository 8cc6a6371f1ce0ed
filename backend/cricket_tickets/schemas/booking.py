"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, model_validator

from cricket_tickets.schemas.match import SeatMapResponse


class BookingCreate(BaseModel):
    """Address the seat either by its match-seat id or by (match_id, seat_id)."""

    match_seat_id: Optional[str] = None
    match_id: Optional[str] = None
    seat_id: Optional[str] = None

    @model_validator(mode="after")
    def check_target(self):
        if self.match_seat_id is None and (self.match_id is None or self.seat_id is None):
            raise ValueError("Provide match_seat_id, or both match_id and seat_id")
        return self


class BookingResponse(BaseModel):
    id: str
    user_id: str
    match_id: str
    match_seat_id: str
    booking_date: datetime
    amount: Decimal
    payment_status: str
    booking_status: str
    ticket_code: str

    model_config = {"from_attributes": True}


class BookingAttemptResponse(BaseModel):
    booking: BookingResponse
    seat_map: SeatMapResponse


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: str
    status: str


class BookingDetail(BaseModel):
    id: str
    user_id: str
    match_id: str
    match_seat_id: str
    booking_date: datetime
    amount: Decimal
    payment_status: str
    booking_status: str
    ticket_code: str
    team_a: str
    team_b: str
    match_date: datetime
    match_status: str
    row_number: str
    seat_number: str
    stand_name: str
    stadium_name: str

    model_config = {"from_attributes": True}
