"""
Package model with seat inventory tracking.

Key design decisions:
- `available_seats` is the live remaining-capacity counter. It is decremented
  by a conditional UPDATE when a booking is made and incremented when one is
  cancelled; it is never recomputed by summing bookings.
- `seat_count` is the capacity configured by the administrator. Summing
  non-cancelled bookings against it is an audit check only.
- `version` is bumped on every inventory write so concurrent modifications
  are visible in the row history.
"""

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship

from travel_agency.db.base import Base, TimestampMixin


class Package(Base, TimestampMixin):
    __tablename__ = "packages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    destination_id = Column(Uuid, ForeignKey("destinations.id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=False, default="")
    base_price = Column(Numeric(12, 2), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    seat_count = Column(Integer, nullable=False)
    available_seats = Column(Integer, nullable=False)

    version = Column(Integer, nullable=False, default=1)

    destination = relationship("Destination", back_populates="packages", lazy="joined")
    bookings = relationship("Booking", back_populates="package")

    __table_args__ = (
        # Prevent negative seat counts at the DB level
        CheckConstraint("available_seats >= 0", name="check_available_seats_non_negative"),
        CheckConstraint("seat_count >= 0", name="check_seat_count_non_negative"),
        CheckConstraint("base_price >= 0", name="check_base_price_non_negative"),
        CheckConstraint("start_date <= end_date", name="check_package_date_range"),
        Index("ix_packages_start_date", "start_date"),
        Index("ix_packages_destination_id", "destination_id"),
    )

    def __repr__(self) -> str:
        return f"<Package(id={self.id}, title={self.title}, available={self.available_seats}/{self.seat_count})>"
