"""
Package service handling catalogue CRUD and the read-only enrichment shown
on package detail pages (weather, holidays, price quotes).

Enrichment never blocks booking: adapter failures come back as "no data".
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.core.config import get_settings
from travel_agency.core.logging import get_logger
from travel_agency.domain.errors import (
    ConversionUnavailableError,
    DestinationNotFoundError,
    InUseError,
    InvalidDateRangeError,
    PackageNotFoundError,
)
from travel_agency.domain.results import Result
from travel_agency.infrastructure.exchange_rates import ExchangeRateClient
from travel_agency.infrastructure.holidays import HolidayClient
from travel_agency.infrastructure.weather import WeatherClient
from travel_agency.models.booking import Booking
from travel_agency.models.destination import Destination
from travel_agency.models.package import Package
from travel_agency.schemas.enrichment import PriceQuote, PublicHoliday, WeatherWindow
from travel_agency.schemas.package import PackageCreate, PackageUpdate
from travel_agency.services import inventory_service

logger = get_logger(__name__)


async def _destination_exists(db: AsyncSession, destination_id: uuid.UUID) -> bool:
    result = await db.execute(select(Destination.id).where(Destination.id == destination_id))
    return result.scalar_one_or_none() is not None


async def create_package(db: AsyncSession, data: PackageCreate) -> Result[Package]:
    """Create a package with every configured seat available."""
    if data.start_date > data.end_date:
        return Result.failure(InvalidDateRangeError())
    if not await _destination_exists(db, data.destination_id):
        return Result.failure(DestinationNotFoundError(data.destination_id))

    package = Package(
        id=uuid.uuid4(),
        destination_id=data.destination_id,
        title=data.title,
        description=data.description,
        base_price=data.base_price,
        start_date=data.start_date,
        end_date=data.end_date,
        seat_count=data.seat_count,
        available_seats=data.seat_count,
    )
    db.add(package)
    await db.flush()
    await db.refresh(package)

    logger.info("package_created", package_id=str(package.id), title=package.title, seats=package.seat_count)
    return Result.success(package)


async def get_package(db: AsyncSession, package_id: uuid.UUID, fresh: bool = False) -> Optional[Package]:
    """
    Get a single package. `fresh` re-reads every column even when the
    instance is already in the session, which matters after seat updates.
    """
    query = select(Package).where(Package.id == package_id)
    if fresh:
        query = query.execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def list_packages(
    db: AsyncSession,
    destination_id: Optional[uuid.UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[Package]:
    """
    Packages ordered by start date. With both dates given, only packages
    whose date range overlaps [date_from, date_to] are returned.
    """
    query = select(Package)
    if destination_id:
        query = query.where(Package.destination_id == destination_id)
    if date_from and date_to:
        query = query.where(Package.start_date <= date_to, Package.end_date >= date_from)

    result = await db.execute(
        query.order_by(Package.start_date.asc()).execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def update_package(db: AsyncSession, package_id: uuid.UUID, data: PackageUpdate) -> Result[Package]:
    """
    Edit catalogue fields. Capacity changes go through the inventory ledger
    so the live seat counter moves by the same delta.
    """
    package = await get_package(db, package_id, fresh=True)
    if package is None:
        return Result.failure(PackageNotFoundError(package_id))

    changes = data.model_dump(exclude_unset=True, exclude={"seat_count"})
    start = changes.get("start_date", package.start_date)
    end = changes.get("end_date", package.end_date)
    if start > end:
        return Result.failure(InvalidDateRangeError())
    if "destination_id" in changes and not await _destination_exists(db, changes["destination_id"]):
        return Result.failure(DestinationNotFoundError(changes["destination_id"]))

    for field, value in changes.items():
        setattr(package, field, value)
    await db.flush()

    if data.seat_count is not None and data.seat_count != package.seat_count:
        adjusted = await inventory_service.adjust_capacity(db, package_id, data.seat_count)
        if not adjusted.ok:
            return Result.failure(adjusted.error)
        package = await get_package(db, package_id, fresh=True)

    logger.info("package_updated", package_id=str(package_id), fields=sorted(data.model_dump(exclude_unset=True)))
    return Result.success(package)


async def delete_package(db: AsyncSession, package_id: uuid.UUID) -> Result[None]:
    package = await get_package(db, package_id)
    if package is None:
        return Result.failure(PackageNotFoundError(package_id))

    bookings = await db.execute(select(func.count()).where(Booking.package_id == package_id))
    count = bookings.scalar_one()
    if count:
        return Result.failure(InUseError("Package", "bookings", count))

    await db.delete(package)
    await db.flush()
    logger.info("package_deleted", package_id=str(package_id))
    return Result.success()


async def get_weather_window(
    db: AsyncSession,
    package_id: uuid.UUID,
    weather: WeatherClient,
) -> Optional[WeatherWindow]:
    result = await db.execute(
        select(Package.start_date, Package.end_date, Destination.latitude, Destination.longitude)
        .join(Destination, Destination.id == Package.destination_id)
        .where(Package.id == package_id)
    )
    row = result.one_or_none()
    if row is None:
        return None
    return await weather.get_weather_window(row.latitude, row.longitude, row.start_date, row.end_date)


async def get_holidays(
    db: AsyncSession,
    package_id: uuid.UUID,
    holidays: HolidayClient,
) -> list[PublicHoliday]:
    result = await db.execute(
        select(Package.start_date, Package.end_date, Destination.iso_code)
        .join(Destination, Destination.id == Package.destination_id)
        .where(Package.id == package_id)
    )
    row = result.one_or_none()
    if row is None or not (row.iso_code or "").strip():
        return []
    return await holidays.get_holidays(row.iso_code, row.start_date, row.end_date)


async def get_price_quote(
    db: AsyncSession,
    package_id: uuid.UUID,
    to_currency: Optional[str],
    fx: ExchangeRateClient,
) -> Result[PriceQuote]:
    """Quote a package's unit price, from its destination currency."""
    result = await db.execute(
        select(Package.base_price, Destination.default_currency)
        .join(Destination, Destination.id == Package.destination_id, isouter=True)
        .where(Package.id == package_id)
    )
    row = result.one_or_none()
    if row is None:
        return Result.failure(PackageNotFoundError(package_id))

    source = row.default_currency or get_settings().DEFAULT_CURRENCY
    target = (to_currency or "").strip().upper() or get_settings().DEFAULT_CURRENCY

    quote = await fx.convert(source, target, row.base_price)
    if quote is None:
        return Result.failure(ConversionUnavailableError(source, target))
    return Result.success(quote)
