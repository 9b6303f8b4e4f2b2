"""Initial schema: users, bookings, occupied_seats.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # Bookings table
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_name", sa.String(100), nullable=True),
        sa.Column("movie_title", sa.String(255), nullable=True),
        sa.Column("screening_time", sa.String(64), nullable=False),
        sa.Column("seats_booked", sa.Integer(), nullable=True),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_user_name", "bookings", ["user_name"])
    # Cancellation resolves "latest booking for this user and screening"
    op.create_index(
        "ix_bookings_user_screening", "bookings", ["user_name", "movie_title", "screening_time"]
    )

    # Occupied seats table
    op.create_table(
        "occupied_seats",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id_fk", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("movie_title", sa.String(255), nullable=True),
        sa.Column("screening_time", sa.String(64), nullable=False),
        sa.Column("seat_index", sa.Integer(), nullable=False),
        # A seat can be held by one booking per screening
        sa.UniqueConstraint("movie_title", "screening_time", "seat_index", name="uq_screening_seat"),
    )
    op.create_index("ix_occupied_seats_booking_id_fk", "occupied_seats", ["booking_id_fk"])


def downgrade() -> None:
    op.drop_table("occupied_seats")
    op.drop_table("bookings")
    op.drop_table("users")
