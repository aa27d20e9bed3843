"""
Tests for the enrichment adapters against mocked upstream APIs.
"""

from datetime import date
from decimal import Decimal

import httpx
import pytest

from travel_agency.infrastructure import CountryClient, ExchangeRateClient, HolidayClient, WeatherClient
from travel_agency.infrastructure.weather import recommend


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


# Exchange rates

@pytest.mark.asyncio
async def test_same_currency_needs_no_request():
    def handler(request):
        raise AssertionError("no request expected")

    fx = ExchangeRateClient(_client(handler), base_url="http://fx")
    assert await fx.get_rate("eur", "EUR") == Decimal("1")


@pytest.mark.asyncio
async def test_convert_rounds_to_cents():
    def handler(request):
        assert request.url.path == "/latest"
        return httpx.Response(200, json={"rates": {"USD": 1.08337}})

    fx = ExchangeRateClient(_client(handler), base_url="http://fx/")
    quote = await fx.convert("EUR", "USD", Decimal("100.00"))

    assert quote.rate == Decimal("1.08337")
    assert quote.amount_converted == Decimal("108.34")
    assert quote.timestamp_utc.tzinfo is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "handler",
    [
        _unreachable,
        lambda request: httpx.Response(404, json={"message": "not found"}),
        lambda request: httpx.Response(200, text="not json"),
        lambda request: httpx.Response(200, json={"rates": {}}),
    ],
)
async def test_rate_unavailable_returns_none(handler):
    fx = ExchangeRateClient(_client(handler), base_url="http://fx")
    assert await fx.get_rate("EUR", "XXX") is None
    assert await fx.convert("EUR", "XXX", Decimal("1.00")) is None


# Weather

def test_recommendation_thresholds():
    assert recommend(25, 10) == "Good window"
    assert recommend(35, 10) == "Mixed"
    assert recommend(25, 45) == "Mixed"
    assert recommend(25, 80) == "Rainy/Unstable"


@pytest.mark.asyncio
async def test_weather_window_averages_daily_values():
    def handler(request):
        assert request.url.params["start_date"] == "2026-07-01"
        return httpx.Response(
            200,
            json={
                "daily": {
                    "time": ["2026-07-01", "2026-07-02", "2026-07-03"],
                    "temperature_2m_max": [24.0, 26.0, None],
                    "temperature_2m_min": [15.0, 17.5, 16.0],
                    "precipitation_probability_max": [10, 20, 30],
                }
            },
        )

    weather = WeatherClient(_client(handler), base_url="http://weather")
    window = await weather.get_weather_window(38.72, -9.14, date(2026, 7, 1), date(2026, 7, 3))

    assert window.average_max_temp_c == 25.0
    assert window.average_min_temp_c == 16.2
    assert window.average_precipitation_probability == 20
    assert window.recommendation == "Good window"


@pytest.mark.asyncio
async def test_weather_without_daily_data():
    weather = WeatherClient(_client(lambda request: httpx.Response(200, json={})), base_url="http://weather")
    assert await weather.get_weather_window(0, 0, date(2026, 7, 1), date(2026, 7, 3)) is None


@pytest.mark.asyncio
async def test_weather_unreachable():
    weather = WeatherClient(_client(_unreachable), base_url="http://weather")
    assert await weather.get_weather_window(0, 0, date(2026, 7, 1), date(2026, 7, 3)) is None


# Holidays

@pytest.mark.asyncio
async def test_holidays_span_years_and_are_filtered():
    requested = []

    def handler(request):
        year = int(request.url.path.split("/")[-2])
        requested.append(request.url.path)
        return httpx.Response(
            200,
            json=[
                {"date": f"{year}-01-01", "localName": "Ano Novo", "name": "New Year's Day"},
                {"date": f"{year}-12-25", "localName": "Natal", "name": "Christmas Day"},
            ],
        )

    holidays = HolidayClient(_client(handler), base_url="http://holidays")
    found = await holidays.get_holidays("pt", date(2026, 12, 20), date(2027, 1, 5))

    assert requested == ["/PublicHolidays/2026/PT", "/PublicHolidays/2027/PT"]
    assert [h.date for h in found] == [date(2026, 12, 25), date(2027, 1, 1)]
    assert found[0].local_name == "Natal"


@pytest.mark.asyncio
async def test_holidays_without_country_code():
    def handler(request):
        raise AssertionError("no request expected")

    holidays = HolidayClient(_client(handler), base_url="http://holidays")
    assert await holidays.get_holidays("", date(2026, 1, 1), date(2026, 1, 31)) == []


@pytest.mark.asyncio
async def test_holidays_unreachable():
    holidays = HolidayClient(_client(_unreachable), base_url="http://holidays")
    assert await holidays.get_holidays("PT", date(2026, 1, 1), date(2026, 1, 31)) == []


# Countries

PORTUGAL = {
    "name": {"common": "Portugal", "official": "Portuguese Republic"},
    "cca2": "PT",
    "capital": ["Lisbon"],
    "currencies": {"EUR": {"name": "Euro", "symbol": "€"}},
    "latlng": [39.5, -8.0],
    "region": "Europe",
    "languages": {"por": "Portuguese"},
    "population": 10305564,
    "flags": {"png": "https://flagcdn.com/w320/pt.png"},
}


@pytest.mark.asyncio
async def test_country_snapshot_by_iso_code():
    def handler(request):
        assert request.url.path == "/alpha/PT"
        return httpx.Response(200, json=PORTUGAL)

    countries = CountryClient(_client(handler), base_url="http://countries")
    snapshot = await countries.get_snapshot("PT")

    assert snapshot.name == "Portugal"
    assert snapshot.currency_code == "EUR"
    assert snapshot.primary_language == "Portuguese"
    assert snapshot.population_millions == 10.31


@pytest.mark.asyncio
async def test_country_snapshot_by_name():
    def handler(request):
        assert request.url.path == "/name/Portugal"
        assert request.url.params["fullText"] == "true"
        return httpx.Response(200, json=[PORTUGAL])

    countries = CountryClient(_client(handler), base_url="http://countries")
    assert (await countries.get_snapshot("Portugal")).region == "Europe"


@pytest.mark.asyncio
async def test_country_snapshot_unavailable():
    countries = CountryClient(_client(_unreachable), base_url="http://countries")
    assert await countries.get_snapshot("Portugal") is None


@pytest.mark.asyncio
async def test_countries_for_import():
    bare = {"name": {"common": "Nowhere"}, "cca2": "NW"}
    countries = CountryClient(
        _client(lambda request: httpx.Response(200, json=[PORTUGAL, bare])), base_url="http://countries"
    )

    imported = await countries.get_all_for_import()

    assert imported[0].capital == "Lisbon"
    assert imported[0].latitude == 39.5
    assert imported[1].capital is None
    assert imported[1].currency_code == ""
