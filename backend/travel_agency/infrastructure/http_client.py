"""
Shared outbound HTTP client for the enrichment adapters.
One connection pool for the whole process, closed on shutdown.
"""

from typing import Optional

import httpx

from travel_agency.core.config import get_settings

_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Get or create the shared client."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        settings = get_settings()
        _http_client = httpx.AsyncClient(
            timeout=settings.EXTERNAL_API_TIMEOUT,
            headers={"User-Agent": f"{settings.APP_NAME}/{settings.APP_VERSION}"},
            follow_redirects=True,
        )
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
