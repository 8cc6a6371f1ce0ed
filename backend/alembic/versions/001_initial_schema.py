"""Initial schema: users, venue topology, matches, match seats and bookings.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # Venue topology
    op.create_table(
        "stadiums",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(1024), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("capacity > 0", name="check_stadium_capacity_positive"),
    )
    op.create_index("ix_stadiums_name", "stadiums", ["name"])

    op.create_table(
        "stands",
        _id(),
        sa.Column("stadium_id", sa.String(36), sa.ForeignKey("stadiums.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("capacity > 0", name="check_stand_capacity_positive"),
        sa.CheckConstraint("base_price >= 0", name="check_stand_base_price_non_negative"),
    )
    op.create_index("ix_stands_stadium_id", "stands", ["stadium_id"])

    op.create_table(
        "seats",
        _id(),
        sa.Column("stand_id", sa.String(36), sa.ForeignKey("stands.id"), nullable=False),
        sa.Column("row_number", sa.String(20), nullable=False),
        sa.Column("seat_number", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'available'")),
        *_timestamps(),
        sa.CheckConstraint("status IN ('available', 'blocked', 'maintenance')", name="check_seat_status"),
    )
    op.create_index("ix_seats_stand_id", "seats", ["stand_id"])
    # Not unique: duplicate labels inside a stand are tolerated
    op.create_index("ix_seats_stand_row_seat", "seats", ["stand_id", "row_number", "seat_number"])

    # Matches
    op.create_table(
        "matches",
        _id(),
        sa.Column("stadium_id", sa.String(36), sa.ForeignKey("stadiums.id"), nullable=False),
        sa.Column("team_a", sa.String(255), nullable=False),
        sa.Column("team_b", sa.String(255), nullable=False),
        sa.Column("match_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'upcoming'")),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('upcoming', 'ongoing', 'completed', 'cancelled')",
            name="check_match_status",
        ),
    )
    op.create_index("ix_matches_stadium_id", "matches", ["stadium_id"])
    # Public listing: WHERE status = 'upcoming' ORDER BY match_date
    op.create_index("ix_matches_status_date", "matches", ["status", "match_date"])

    op.create_table(
        "match_seats",
        _id(),
        sa.Column("match_id", sa.String(36), sa.ForeignKey("matches.id"), nullable=False),
        sa.Column("seat_id", sa.String(36), sa.ForeignKey("seats.id"), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'available'")),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.UniqueConstraint("match_id", "seat_id", name="uq_match_seat"),
        sa.CheckConstraint("price >= 0", name="check_match_seat_price_non_negative"),
        sa.CheckConstraint(
            "status IN ('available', 'booked', 'blocked', 'maintenance')",
            name="check_match_seat_status",
        ),
    )
    op.create_index("ix_match_seats_match_id", "match_seats", ["match_id"])
    op.create_index("ix_match_seats_seat_id", "match_seats", ["seat_id"])

    # Bookings
    op.create_table(
        "bookings",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("match_id", sa.String(36), sa.ForeignKey("matches.id"), nullable=False),
        sa.Column("match_seat_id", sa.String(36), sa.ForeignKey("match_seats.id"), nullable=False),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("booking_status", sa.String(20), nullable=False, server_default=sa.text("'confirmed'")),
        sa.Column("ticket_code", sa.String(8), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("amount >= 0", name="check_booking_amount_non_negative"),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'completed', 'failed', 'refunded')",
            name="check_booking_payment_status",
        ),
        sa.CheckConstraint("booking_status IN ('confirmed', 'cancelled')", name="check_booking_status"),
    )
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_match_id", "bookings", ["match_id"])
    op.create_index("ix_bookings_match_seat_id", "bookings", ["match_seat_id"])
    op.create_index("ix_bookings_ticket_code", "bookings", ["ticket_code"])
    op.create_index("ix_bookings_user_date", "bookings", ["user_id", "booking_date"])
    # The store refuses a second confirmed booking for one match seat,
    # whatever the application does.
    op.create_index(
        "uq_confirmed_booking_per_match_seat",
        "bookings",
        ["match_seat_id"],
        unique=True,
        postgresql_where=sa.text("booking_status = 'confirmed'"),
        sqlite_where=sa.text("booking_status = 'confirmed'"),
    )


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("match_seats")
    op.drop_table("matches")
    op.drop_table("seats")
    op.drop_table("stands")
    op.drop_table("stadiums")
    op.drop_table("users")
