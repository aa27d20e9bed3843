"""
Infrastructure layer - third-party API integrations.
Keeps business logic clean from transport details.
"""

from .http_client import get_http_client, close_http_client
from .exchange_rates import ExchangeRateClient
from .weather import WeatherClient
from .holidays import HolidayClient
from .countries import CountryClient

__all__ = [
    'get_http_client', 'close_http_client',
    'ExchangeRateClient', 'WeatherClient', 'HolidayClient', 'CountryClient',
]
