"""
Booking model representing a customer's reservation of seats in a package.

Key design decisions:
- `total_base_price` is frozen at booking time; later package price changes
  do not touch existing bookings
- Status is an open string so administrators can record states beyond the
  known ones; cancellation keeps the row for auditing
"""

import uuid
from enum import Enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from travel_agency.db.base import Base, TimestampMixin


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    PAID = "Paid"


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    package_id = Column(Uuid, ForeignKey("packages.id"), nullable=False, index=True)
    customer_id = Column(Uuid, ForeignKey("customers.id"), nullable=False, index=True)
    people_count = Column(Integer, nullable=False)
    total_base_price = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)

    package = relationship("Package", back_populates="bookings", lazy="joined")
    customer = relationship("Customer", back_populates="bookings", lazy="joined")

    __table_args__ = (
        CheckConstraint("people_count > 0", name="check_booking_people_count_positive"),
    )

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED.value

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, customer={self.customer_id}, package={self.package_id}, status={self.status})>"
