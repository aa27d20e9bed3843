"""
Pydantic schemas for third-party enrichment data: currency quotes, weather
windows, public holidays and country metadata.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class PriceQuote(BaseModel):
    from_currency: str
    to_currency: str
    rate: Decimal
    amount_base: Decimal
    amount_converted: Decimal
    timestamp_utc: datetime


class WeatherWindow(BaseModel):
    start_date: date
    end_date: date
    average_max_temp_c: float
    average_min_temp_c: float
    average_precipitation_probability: float
    recommendation: str


class PublicHoliday(BaseModel):
    date: date
    local_name: str = ""
    name: str = ""


class CountrySnapshot(BaseModel):
    name: str
    region: str = ""
    primary_language: str = ""
    currency_code: str = ""
    population_millions: float = 0
    flag_url: str = ""


class CountryImport(BaseModel):
    name: str
    iso_code: str = ""
    capital: Optional[str] = None
    currency_code: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    region: str = ""
    flag_url: str = ""
    primary_language: str = ""
    population_millions: float = 0
