"""
Matches and the per-match seat records that bookings reserve.

Key design decisions:
- UNIQUE (match_id, seat_id): one bookable unit per seat per match
- match_seats.status moves available -> booked only through a conditional
  UPDATE (see booking_service), never by a blind write
- version is bumped on every status change for observability of contention
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from cricket_tickets.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

MATCH_UPCOMING = "upcoming"
MATCH_ONGOING = "ongoing"
MATCH_COMPLETED = "completed"
MATCH_CANCELLED = "cancelled"
MATCH_STATUSES = (MATCH_UPCOMING, MATCH_ONGOING, MATCH_COMPLETED, MATCH_CANCELLED)
BOOKABLE_MATCH_STATUSES = (MATCH_UPCOMING, MATCH_ONGOING)

MATCH_SEAT_AVAILABLE = "available"
MATCH_SEAT_BOOKED = "booked"
MATCH_SEAT_BLOCKED = "blocked"
MATCH_SEAT_MAINTENANCE = "maintenance"
MATCH_SEAT_STATUSES = (
    MATCH_SEAT_AVAILABLE,
    MATCH_SEAT_BOOKED,
    MATCH_SEAT_BLOCKED,
    MATCH_SEAT_MAINTENANCE,
)
# Statuses an operator may assign; "booked" is only reachable through a booking.
OPERATOR_SEAT_STATUSES = (MATCH_SEAT_AVAILABLE, MATCH_SEAT_BLOCKED, MATCH_SEAT_MAINTENANCE)


class Match(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "matches"

    stadium_id = Column(String(36), ForeignKey("stadiums.id"), nullable=False, index=True)
    team_a = Column(String(255), nullable=False)
    team_b = Column(String(255), nullable=False)
    match_date = Column(DateTime(timezone=True), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=MATCH_UPCOMING)

    stadium = relationship("Stadium", back_populates="matches")
    match_seats = relationship("MatchSeat", back_populates="match")

    __table_args__ = (
        CheckConstraint(
            "status IN ('upcoming', 'ongoing', 'completed', 'cancelled')",
            name="check_match_status",
        ),
        # Public listing: WHERE status = 'upcoming' ORDER BY match_date
        Index("ix_matches_status_date", "status", "match_date"),
    )

    def __repr__(self) -> str:
        return f"<Match(id={self.id}, {self.team_a} vs {self.team_b}, status={self.status})>"


class MatchSeat(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "match_seats"

    match_id = Column(String(36), ForeignKey("matches.id"), nullable=False, index=True)
    seat_id = Column(String(36), ForeignKey("seats.id"), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=MATCH_SEAT_AVAILABLE)
    version = Column(Integer, nullable=False, default=1)

    match = relationship("Match", back_populates="match_seats")
    seat = relationship("Seat")

    __table_args__ = (
        UniqueConstraint("match_id", "seat_id", name="uq_match_seat"),
        CheckConstraint("price >= 0", name="check_match_seat_price_non_negative"),
        CheckConstraint(
            "status IN ('available', 'booked', 'blocked', 'maintenance')",
            name="check_match_seat_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<MatchSeat(id={self.id}, match={self.match_id}, seat={self.seat_id}, status={self.status})>"
