"""
Weather forecast window from the open-meteo daily forecast API.
"""

from datetime import date
from statistics import mean
from typing import Optional

import httpx

from travel_agency.core.config import get_settings
from travel_agency.core.logging import get_logger
from travel_agency.core.metrics import record_external_call
from travel_agency.schemas.enrichment import WeatherWindow

logger = get_logger(__name__)

DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_probability_max"


def recommend(avg_max: float, avg_precipitation: float) -> str:
    if avg_precipitation <= 30 and 18 <= avg_max <= 32:
        return "Good window"
    if avg_precipitation <= 50:
        return "Mixed"
    return "Rainy/Unstable"


class WeatherClient:
    def __init__(self, client: httpx.AsyncClient, base_url: Optional[str] = None):
        self._client = client
        self._base_url = base_url or get_settings().WEATHER_API_URL

    async def get_weather_window(
        self,
        latitude: float,
        longitude: float,
        start: date,
        end: date,
    ) -> Optional[WeatherWindow]:
        params = {
            "latitude": f"{latitude:.6f}",
            "longitude": f"{longitude:.6f}",
            "daily": DAILY_FIELDS,
            "timezone": "auto",
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
        }
        try:
            response = await self._client.get(self._base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("weather_unavailable", latitude=latitude, longitude=longitude, error=str(e))
            record_external_call("weather", ok=False)
            return None

        daily = data.get("daily") if isinstance(data, dict) else None
        if not daily or not daily.get("time"):
            record_external_call("weather", ok=False)
            return None

        max_temps = [t for t in daily.get("temperature_2m_max") or [] if t is not None]
        min_temps = [t for t in daily.get("temperature_2m_min") or [] if t is not None]
        if not max_temps or not min_temps:
            record_external_call("weather", ok=False)
            return None
        precipitation = [p for p in daily.get("precipitation_probability_max") or [] if p is not None]

        avg_max = mean(max_temps)
        avg_min = mean(min_temps)
        avg_precipitation = mean(precipitation) if precipitation else 0.0

        record_external_call("weather", ok=True)
        return WeatherWindow(
            start_date=start,
            end_date=end,
            average_max_temp_c=round(avg_max, 1),
            average_min_temp_c=round(avg_min, 1),
            average_precipitation_probability=round(avg_precipitation),
            recommendation=recommend(avg_max, avg_precipitation),
        )
