"""
Shared route dependencies: enrichment clients and the session cart.
"""

import httpx
from fastapi import Depends, Request

from travel_agency.domain.cart import Cart
from travel_agency.infrastructure import (
    CountryClient,
    ExchangeRateClient,
    HolidayClient,
    WeatherClient,
    get_http_client,
)

CART_SESSION_KEY = "cart"


def get_exchange_rates(client: httpx.AsyncClient = Depends(get_http_client)) -> ExchangeRateClient:
    return ExchangeRateClient(client)


def get_weather(client: httpx.AsyncClient = Depends(get_http_client)) -> WeatherClient:
    return WeatherClient(client)


def get_holidays(client: httpx.AsyncClient = Depends(get_http_client)) -> HolidayClient:
    return HolidayClient(client)


def get_countries(client: httpx.AsyncClient = Depends(get_http_client)) -> CountryClient:
    return CountryClient(client)


def get_cart(request: Request) -> Cart:
    """Rebuild the cart from the signed session cookie."""
    return Cart.from_session(request.session.get(CART_SESSION_KEY))


def save_cart(request: Request, cart: Cart) -> None:
    request.session[CART_SESSION_KEY] = cart.to_session()
