"""
Currency conversion against the frankfurter.app API.

Returns None on any upstream failure (unreachable service, unknown
currency, malformed payload). Callers treat None as "conversion
unavailable", never as a fatal error.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import httpx

from travel_agency.core.config import get_settings
from travel_agency.core.logging import get_logger
from travel_agency.core.metrics import record_external_call
from travel_agency.domain.pricing import round_money
from travel_agency.schemas.enrichment import PriceQuote

logger = get_logger(__name__)


def _normalize(code: Optional[str]) -> str:
    return (code or "").strip().upper()


class ExchangeRateClient:
    def __init__(self, client: httpx.AsyncClient, base_url: Optional[str] = None):
        self._client = client
        self._base_url = (base_url or get_settings().EXCHANGE_RATE_API_URL).rstrip("/")

    async def get_rate(self, from_currency: str, to_currency: str) -> Optional[Decimal]:
        from_currency, to_currency = _normalize(from_currency), _normalize(to_currency)
        if not from_currency or not to_currency:
            return None
        if from_currency == to_currency:
            return Decimal("1")

        try:
            response = await self._client.get(
                f"{self._base_url}/latest",
                params={"from": from_currency, "to": to_currency},
            )
            response.raise_for_status()
            data = response.json(parse_float=Decimal)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "exchange_rate_unavailable",
                from_currency=from_currency,
                to_currency=to_currency,
                error=str(e),
            )
            record_external_call("exchange_rates", ok=False)
            return None

        rate = (data.get("rates") or {}).get(to_currency) if isinstance(data, dict) else None
        if rate is None:
            logger.warning("exchange_rate_missing", from_currency=from_currency, to_currency=to_currency)
            record_external_call("exchange_rates", ok=False)
            return None

        record_external_call("exchange_rates", ok=True)
        return Decimal(str(rate))

    async def convert(self, from_currency: str, to_currency: str, amount: Decimal) -> Optional[PriceQuote]:
        from_currency, to_currency = _normalize(from_currency), _normalize(to_currency)
        rate = await self.get_rate(from_currency, to_currency)
        if rate is None:
            return None

        return PriceQuote(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            amount_base=amount,
            amount_converted=round_money(amount * rate),
            timestamp_utc=datetime.now(timezone.utc),
        )
