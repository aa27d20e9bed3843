"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class BookingCreate(BaseModel):
    customer_id: UUID
    package_id: UUID
    # Non-positive counts are rejected by the booking engine, not here
    people_count: int = 1


class BookingStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, max_length=20)


class BookingResponse(BaseModel):
    id: UUID
    customer_id: UUID
    package_id: UUID
    people_count: int
    total_base_price: Decimal
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: UUID
    status: str
