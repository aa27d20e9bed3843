"""
Pytest fixtures for test database, client, and catalogue data.

Each test gets its own SQLite file so independent sessions can race each
other the way separate requests do against the real database.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./travel_agency_test.db")
os.environ["REDIS_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from travel_agency.main import app
from travel_agency.db.base import Base
from travel_agency.db.session import get_db, transactional_session
from travel_agency.models import Customer, Destination, Package


@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables in a fresh database file, yield a session factory, then dispose."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that gives every request its own session, like production."""

    async def override_get_db():
        async with transactional_session(session_factory) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_destination(db_session: AsyncSession) -> Destination:
    """Lisbon, priced in EUR."""
    destination = Destination(
        country_name="Portugal",
        city="Lisbon",
        latitude=38.7223,
        longitude=-9.1393,
        iso_code="PT",
        default_currency="EUR",
    )
    db_session.add(destination)
    await db_session.commit()
    await db_session.refresh(destination)
    return destination


async def _make_package(
    db_session: AsyncSession,
    destination: Destination,
    title: str,
    seats: int,
    available: int,
    price: str = "100.00",
    starts_in: int = 30,
    nights: int = 7,
) -> Package:
    start = date.today() + timedelta(days=starts_in)
    package = Package(
        destination_id=destination.id,
        title=title,
        description=f"{title} package",
        base_price=Decimal(price),
        start_date=start,
        end_date=start + timedelta(days=nights),
        seat_count=seats,
        available_seats=available,
    )
    db_session.add(package)
    await db_session.commit()
    await db_session.refresh(package)
    return package


@pytest_asyncio.fixture
async def make_package(db_session: AsyncSession, test_destination: Destination):
    """Factory for extra packages at the test destination."""

    async def factory(title: str, seats: int, available=None, price: str = "100.00", **kwargs) -> Package:
        return await _make_package(
            db_session,
            test_destination,
            title,
            seats,
            seats if available is None else available,
            price,
            **kwargs,
        )

    return factory


@pytest_asyncio.fixture
async def test_package(db_session: AsyncSession, test_destination: Destination) -> Package:
    """A package with 10 seats at 250.00 per person."""
    return await _make_package(db_session, test_destination, "Lisbon Getaway", 10, 10, "250.00")


@pytest_asyncio.fixture
async def sold_out_package(db_session: AsyncSession, test_destination: Destination) -> Package:
    """A package with 0 available seats."""
    return await _make_package(db_session, test_destination, "Sold Out Tour", 5, 0, "99.00")


@pytest_asyncio.fixture
async def test_customer(db_session: AsyncSession) -> Customer:
    customer = Customer(first_name="Ana", last_name="Silva", email="ana@example.com")
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer

