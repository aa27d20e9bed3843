"""
Redis caching service for package listings.

CACHING STRATEGY
================

What we cache:
  - Package listing responses (JSON-serialized)
  - Cache key pattern: "packages:list:destination={id}&from={date}&to={date}"

Why:
  - Browsing the catalogue is the most frequent read operation
  - The data changes only on catalogue edits and seat movements

Invalidation strategy:
  - Booking, cancellation, checkout and package writes flag their session;
    once it commits, every key under "packages:list:" is deleted via SCAN.
    Dropping keys before the commit would let a concurrent listing re-cache
    the old seat counts.
  - TTL-based expiry as safety net (5 minutes)

Why NOT cache individual packages or remaining seats:
  - Checkout needs real-time seat counts; the atomic decrement reads the
    database, never the cache
"""

import json
from datetime import date
from typing import Optional
from uuid import UUID

import redis.asyncio as redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.core.config import get_settings
from travel_agency.core.logging import get_logger
from travel_agency.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

PACKAGE_LIST_PREFIX = "packages:list:"
PACKAGES_CHANGED = "packages_changed"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            # Test connection
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except (RedisError, OSError) as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_package_list_key(
    destination_id: Optional[UUID],
    date_from: Optional[date],
    date_to: Optional[date],
) -> str:
    return f"{PACKAGE_LIST_PREFIX}destination={destination_id or ''}&from={date_from or ''}&to={date_to or ''}"


async def get_cached_packages(key: str) -> Optional[dict]:
    """Retrieve cached package list response."""
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(key)
        if data:
            logger.debug("cache_hit", key=key)
            record_cache_operation("get", hit=True)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
        record_cache_operation("get", hit=False)
    except (RedisError, ValueError) as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_packages(key: str, data: dict) -> None:
    """Cache package list response with TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_package_cache() -> None:
    """
    Invalidate all cached package listings.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{PACKAGE_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except RedisError as e:
        return {"status": "error", "error": str(e)}


def mark_packages_changed(db: AsyncSession) -> None:
    """Flag a session whose writes change package listings."""
    db.info[PACKAGES_CHANGED] = True


async def drop_stale_listings(db: AsyncSession) -> None:
    """Invalidate listings if the session was flagged. Call once the transaction has ended."""
    if db.info.pop(PACKAGES_CHANGED, False):
        await invalidate_package_cache()
