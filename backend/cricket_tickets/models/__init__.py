from cricket_tickets.models.user import User
from cricket_tickets.models.venue import Stadium, Stand, Seat
from cricket_tickets.models.match import Match, MatchSeat
from cricket_tickets.models.booking import Booking

__all__ = ["User", "Stadium", "Stand", "Seat", "Match", "MatchSeat", "Booking"]
