"""
Static venue topology: stadiums own stands, stands own seats.

Key design decisions:
- Seat.status is the physical seat's state and only applies to a match
  when no match_seats row exists for that match
- (stand_id, row_number, seat_number) is indexed but not unique
- Deletes are restricted by the catalog service, not cascaded here
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from cricket_tickets.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

SEAT_AVAILABLE = "available"
SEAT_BLOCKED = "blocked"
SEAT_MAINTENANCE = "maintenance"
SEAT_STATUSES = (SEAT_AVAILABLE, SEAT_BLOCKED, SEAT_MAINTENANCE)


class Stadium(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "stadiums"

    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)

    stands = relationship("Stand", back_populates="stadium", order_by="Stand.name")
    matches = relationship("Match", back_populates="stadium")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_stadium_capacity_positive"),
        Index("ix_stadiums_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Stadium(id={self.id}, name={self.name})>"


class Stand(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "stands"

    stadium_id = Column(String(36), ForeignKey("stadiums.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    base_price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)

    stadium = relationship("Stadium", back_populates="stands")
    seats = relationship("Seat", back_populates="stand")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_stand_capacity_positive"),
        CheckConstraint("base_price >= 0", name="check_stand_base_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Stand(id={self.id}, name={self.name}, base_price={self.base_price})>"


class Seat(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "seats"

    stand_id = Column(String(36), ForeignKey("stands.id"), nullable=False, index=True)
    row_number = Column(String(20), nullable=False)
    seat_number = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=SEAT_AVAILABLE)

    stand = relationship("Stand", back_populates="seats")

    __table_args__ = (
        CheckConstraint(
            "status IN ('available', 'blocked', 'maintenance')",
            name="check_seat_status",
        ),
        # Ordered listing of a stand's seats: WHERE stand_id = ? ORDER BY row, seat
        Index("ix_seats_stand_row_seat", "stand_id", "row_number", "seat_number"),
    )

    def __repr__(self) -> str:
        return f"<Seat(id={self.id}, row={self.row_number}, seat={self.seat_number}, status={self.status})>"
