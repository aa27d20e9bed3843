"""
Pydantic schemas for package-related request/response validation.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class PackageCreate(BaseModel):
    destination_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=2000)
    base_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    start_date: date
    end_date: date
    seat_count: int = Field(..., ge=0, le=100000)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class PackageUpdate(BaseModel):
    destination_id: Optional[UUID] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    seat_count: Optional[int] = Field(None, ge=0, le=100000)


class PackageResponse(BaseModel):
    id: UUID
    destination_id: UUID
    title: str
    description: str
    base_price: Decimal
    start_date: date
    end_date: date
    seat_count: int
    available_seats: int
    created_at: datetime

    model_config = {"from_attributes": True}


class PackageListResponse(BaseModel):
    packages: list[PackageResponse]
    total: int
    cached: bool = False


class RemainingSeatsResponse(BaseModel):
    package_id: UUID
    remaining: int


class SeatAuditResponse(BaseModel):
    package_id: UUID
    seat_count: int
    available_seats: int
    booked_seats: int
    consistent: bool
