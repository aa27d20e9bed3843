"""
Pydantic schemas for destination-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class DestinationCreate(BaseModel):
    country_name: str = Field(..., min_length=1, max_length=120)
    city: str = Field(..., min_length=1, max_length=120)
    latitude: float = Field(0.0, ge=-90, le=90)
    longitude: float = Field(0.0, ge=-180, le=180)
    iso_code: str = Field("", max_length=3)
    default_currency: str = Field("EUR", min_length=3, max_length=3)


class DestinationUpdate(BaseModel):
    country_name: Optional[str] = Field(None, min_length=1, max_length=120)
    city: Optional[str] = Field(None, min_length=1, max_length=120)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    iso_code: Optional[str] = Field(None, max_length=3)
    default_currency: Optional[str] = Field(None, min_length=3, max_length=3)


class DestinationResponse(BaseModel):
    id: UUID
    country_name: str
    city: str
    latitude: float
    longitude: float
    iso_code: str
    default_currency: str
    created_at: datetime

    model_config = {"from_attributes": True}


class DestinationImportResponse(BaseModel):
    imported: int
