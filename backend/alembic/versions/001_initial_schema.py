"""Initial schema: destinations, packages, customers, bookings with indexes and constraints.

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


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Destinations table
    op.create_table(
        "destinations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("country_name", sa.String(120), nullable=False),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("longitude", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("iso_code", sa.String(3), nullable=False, server_default=""),
        sa.Column("default_currency", sa.String(3), nullable=False, server_default="EUR"),
        *_timestamps(),
    )
    op.create_index("ix_destinations_iso_code", "destinations", ["iso_code"])
    op.create_index("ix_destinations_country_city", "destinations", ["country_name", "city"])

    # Packages table
    op.create_table(
        "packages",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("destination_id", sa.Uuid(), sa.ForeignKey("destinations.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.String(2000), nullable=False, server_default=""),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("seat_count", sa.Integer(), nullable=False),
        sa.Column("available_seats", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        # The guarded decrement never overdraws; this is the last line of defence
        sa.CheckConstraint("available_seats >= 0", name="check_available_seats_non_negative"),
        sa.CheckConstraint("seat_count >= 0", name="check_seat_count_non_negative"),
        sa.CheckConstraint("base_price >= 0", name="check_base_price_non_negative"),
        sa.CheckConstraint("start_date <= end_date", name="check_package_date_range"),
    )
    # Listings are ordered and range-filtered by start date
    op.create_index("ix_packages_start_date", "packages", ["start_date"])
    op.create_index("ix_packages_destination_id", "packages", ["destination_id"])

    # Customers table
    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_customers_email", "customers", ["email"], unique=True)

    # Bookings table
    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("package_id", sa.Uuid(), sa.ForeignKey("packages.id"), nullable=False),
        sa.Column("customer_id", sa.Uuid(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("people_count", sa.Integer(), nullable=False),
        sa.Column("total_base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        *_timestamps(),
        sa.CheckConstraint("people_count > 0", name="check_booking_people_count_positive"),
    )
    op.create_index("ix_bookings_package_id", "bookings", ["package_id"])
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("customers")
    op.drop_table("packages")
    op.drop_table("destinations")
