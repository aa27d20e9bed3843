"""
Async engine and request-scoped session dependency.

The session owns the transaction: services flush, `get_db` commits when the
request handler returns and rolls back when it raises.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from travel_agency.core.config import get_settings
from travel_agency.services.cache_service import drop_stale_listings

settings = get_settings()


def _engine_options(url: str) -> dict:
    # Pool sizing only applies to server databases
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL),
)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def transactional_session(
    factory: async_sessionmaker = AsyncSessionLocal,
) -> AsyncGenerator[AsyncSession, None]:
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            # Per-item checkout commits bookings before it reports a failure
            await drop_stale_listings(session)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with transactional_session() as session:
        yield session
