"""
Typed repositories, one per entity.
Services talk to these instead of building queries against raw tables.
"""

from .base import Repository
from .booking_repository import BookingRepository
from .catalog_repository import SeatRepository, StadiumRepository, StandRepository
from .match_repository import MatchRepository, MatchSeatRepository
from .user_repository import UserRepository

__all__ = [
    "Repository",
    "BookingRepository",
    "SeatRepository",
    "StadiumRepository",
    "StandRepository",
    "MatchRepository",
    "MatchSeatRepository",
    "UserRepository",
]
