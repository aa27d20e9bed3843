"""
Destination model: a city in a country that packages travel to.

`default_currency` is the currency package prices are quoted in and the
source currency for booking total conversions.
"""

import uuid

from sqlalchemy import Column, Float, Index, String, Uuid
from sqlalchemy.orm import relationship

from travel_agency.db.base import Base, TimestampMixin


class Destination(Base, TimestampMixin):
    __tablename__ = "destinations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    country_name = Column(String(120), nullable=False)
    city = Column(String(120), nullable=False)
    latitude = Column(Float, nullable=False, default=0.0)
    longitude = Column(Float, nullable=False, default=0.0)
    iso_code = Column(String(3), nullable=False, default="")
    default_currency = Column(String(3), nullable=False, default="EUR")

    packages = relationship("Package", back_populates="destination")

    __table_args__ = (
        Index("ix_destinations_iso_code", "iso_code"),
        Index("ix_destinations_country_city", "country_name", "city"),
    )

    def __repr__(self) -> str:
        return f"<Destination(id={self.id}, city={self.city}, country={self.country_name})>"
