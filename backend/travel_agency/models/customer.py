"""
Customer model. E-mail is the natural key used to attach cart checkouts.
"""

import uuid

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship

from travel_agency.db.base import Base, TimestampMixin


class Customer(Base, TimestampMixin):
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)

    bookings = relationship("Booking", back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, email={self.email})>"
