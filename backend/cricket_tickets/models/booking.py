"""
Booking model: one user's ticket for one match seat.

Key design decisions:
- Partial unique index on match_seat_id among confirmed bookings: the store
  itself refuses a second confirmed booking for the same seat
- amount is captured at booking time and never re-derived
- Cancellation flips booking_status; rows are never deleted
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String, text
from sqlalchemy.orm import relationship

from cricket_tickets.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow

BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"

PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"
PAYMENT_REFUNDED = "refunded"


class Booking(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "bookings"

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    match_id = Column(String(36), ForeignKey("matches.id"), nullable=False, index=True)
    match_seat_id = Column(String(36), ForeignKey("match_seats.id"), nullable=False, index=True)
    booking_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_status = Column(String(20), nullable=False, default=PAYMENT_PENDING)
    booking_status = Column(String(20), nullable=False, default=BOOKING_CONFIRMED)
    ticket_code = Column(String(8), nullable=False, index=True)

    user = relationship("User", back_populates="bookings")
    match = relationship("Match")
    match_seat = relationship("MatchSeat")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_booking_amount_non_negative"),
        CheckConstraint(
            "payment_status IN ('pending', 'completed', 'failed', 'refunded')",
            name="check_booking_payment_status",
        ),
        CheckConstraint(
            "booking_status IN ('confirmed', 'cancelled')",
            name="check_booking_status",
        ),
        # At most one confirmed booking per match seat
        Index(
            "uq_confirmed_booking_per_match_seat",
            "match_seat_id",
            unique=True,
            postgresql_where=text("booking_status = 'confirmed'"),
            sqlite_where=text("booking_status = 'confirmed'"),
        ),
        # Ledger ordering
        Index("ix_bookings_user_date", "user_id", "booking_date"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, seat={self.match_seat_id}, status={self.booking_status})>"
