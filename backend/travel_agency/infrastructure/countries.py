"""
Country metadata from the restcountries v3.1 API.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx

from travel_agency.core.config import get_settings
from travel_agency.core.logging import get_logger
from travel_agency.core.metrics import record_external_call
from travel_agency.schemas.enrichment import CountryImport, CountrySnapshot

logger = get_logger(__name__)

SNAPSHOT_FIELDS = "name,region,languages,currencies,population,flags"
IMPORT_FIELDS = "name,cca2,capital,currencies,latlng,region,languages,population,flags"


def _name(rc: dict[str, Any]) -> str:
    name = rc.get("name") or {}
    return name.get("common") or name.get("official") or "N/A"


def _first_key(mapping: Optional[dict]) -> str:
    return next(iter(mapping), "") if mapping else ""


def _first_value(mapping: Optional[dict]) -> str:
    return next(iter(mapping.values()), "") if mapping else ""


def _flag(rc: dict[str, Any]) -> str:
    flags = rc.get("flags") or {}
    return flags.get("png") or flags.get("svg") or ""


def _population_millions(rc: dict[str, Any]) -> float:
    population = rc.get("population") or 0
    return round(population / 1_000_000, 2) if population > 0 else 0


class CountryClient:
    def __init__(self, client: httpx.AsyncClient, base_url: Optional[str] = None):
        self._client = client
        self._base_url = (base_url or get_settings().COUNTRY_API_URL).rstrip("/")

    async def _get_list(self, path: str, params: dict) -> Optional[list]:
        try:
            response = await self._client.get(f"{self._base_url}/{path}", params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("countries_unavailable", path=path, error=str(e))
            record_external_call("countries", ok=False)
            return None
        record_external_call("countries", ok=True)
        if isinstance(data, dict):
            data = [data]
        return data if isinstance(data, list) else None

    async def get_snapshot(self, country_or_iso: str) -> Optional[CountrySnapshot]:
        term = (country_or_iso or "").strip()
        if not term:
            return None

        if len(term) <= 3:
            items = await self._get_list(f"alpha/{quote(term)}", {"fields": SNAPSHOT_FIELDS})
        else:
            items = await self._get_list(f"name/{quote(term)}", {"fullText": "true", "fields": SNAPSHOT_FIELDS})
        if not items:
            return None

        rc = items[0]
        return CountrySnapshot(
            name=_name(rc),
            region=rc.get("region") or "",
            primary_language=_first_value(rc.get("languages")),
            currency_code=_first_key(rc.get("currencies")),
            population_millions=_population_millions(rc),
            flag_url=_flag(rc),
        )

    async def get_all_for_import(self) -> list[CountryImport]:
        items = await self._get_list("all", {"fields": IMPORT_FIELDS}) or []

        countries = []
        for rc in items:
            latlng = rc.get("latlng") or []
            capital = rc.get("capital") or []
            countries.append(
                CountryImport(
                    name=_name(rc),
                    iso_code=rc.get("cca2") or "",
                    capital=capital[0] if capital else None,
                    currency_code=_first_key(rc.get("currencies")),
                    latitude=latlng[0] if len(latlng) >= 2 else 0.0,
                    longitude=latlng[1] if len(latlng) >= 2 else 0.0,
                    region=rc.get("region") or "",
                    flag_url=_flag(rc),
                    primary_language=_first_value(rc.get("languages")),
                    population_millions=_population_millions(rc),
                )
            )
        return countries
