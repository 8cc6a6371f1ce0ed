from cricket_tickets.schemas.user import UserCreate, UserResponse, UserLogin, Token
from cricket_tickets.schemas.venue import (
    StadiumCreate, StadiumUpdate, StadiumResponse,
    StandCreate, StandUpdate, StandResponse,
    SeatCreate, SeatUpdate, SeatResponse, BulkSeatCreate, BulkSeatResult,
)
from cricket_tickets.schemas.match import (
    MatchCreate, MatchUpdate, MatchResponse, MatchListResponse,
    SeatState, SeatRow, SeatMapResponse,
    PricingEntry, PricingSave, SeatPriceEdit, PriceMultiplier, PricingSaveResponse,
)
from cricket_tickets.schemas.booking import (
    BookingCreate, BookingResponse, BookingAttemptResponse, BookingCancelResponse, BookingDetail,
)

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "StadiumCreate", "StadiumUpdate", "StadiumResponse",
    "StandCreate", "StandUpdate", "StandResponse",
    "SeatCreate", "SeatUpdate", "SeatResponse", "BulkSeatCreate", "BulkSeatResult",
    "MatchCreate", "MatchUpdate", "MatchResponse", "MatchListResponse",
    "SeatState", "SeatRow", "SeatMapResponse",
    "PricingEntry", "PricingSave", "SeatPriceEdit", "PriceMultiplier", "PricingSaveResponse",
    "BookingCreate", "BookingResponse", "BookingAttemptResponse", "BookingCancelResponse", "BookingDetail",
]
