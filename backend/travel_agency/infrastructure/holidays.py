"""
Public holidays from the nager.date API, one request per calendar year.
"""

from datetime import date
from typing import Optional

import httpx

from travel_agency.core.config import get_settings
from travel_agency.core.logging import get_logger
from travel_agency.core.metrics import record_external_call
from travel_agency.schemas.enrichment import PublicHoliday

logger = get_logger(__name__)


class HolidayClient:
    def __init__(self, client: httpx.AsyncClient, base_url: Optional[str] = None):
        self._client = client
        self._base_url = (base_url or get_settings().HOLIDAY_API_URL).rstrip("/")

    async def _fetch_year(self, year: int, iso2: str) -> list[PublicHoliday]:
        try:
            response = await self._client.get(f"{self._base_url}/PublicHolidays/{year}/{iso2}")
            response.raise_for_status()
            items = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("holidays_unavailable", year=year, iso2=iso2, error=str(e))
            record_external_call("holidays", ok=False)
            return []

        holidays = []
        for item in items if isinstance(items, list) else []:
            try:
                holidays.append(
                    PublicHoliday(
                        date=date.fromisoformat(str(item["date"])[:10]),
                        local_name=item.get("localName") or "",
                        name=item.get("name") or "",
                    )
                )
            except (KeyError, TypeError, ValueError):
                logger.debug("holiday_entry_skipped", entry=item)
        record_external_call("holidays", ok=True)
        return holidays

    async def get_holidays(self, iso2: str, start: date, end: date) -> list[PublicHoliday]:
        iso2 = (iso2 or "").strip().upper()
        if not iso2 or start > end:
            return []

        found: list[PublicHoliday] = []
        for year in range(start.year, end.year + 1):
            found.extend(await self._fetch_year(year, iso2))

        return sorted((h for h in found if start <= h.date <= end), key=lambda h: h.date)
