"""
Destination service: CRUD, country metadata and bulk country import.
"""

import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.core.logging import get_logger
from travel_agency.domain.errors import DestinationNotFoundError, InUseError
from travel_agency.domain.results import Result
from travel_agency.infrastructure.countries import CountryClient
from travel_agency.models.destination import Destination
from travel_agency.models.package import Package
from travel_agency.schemas.destination import DestinationCreate, DestinationUpdate
from travel_agency.schemas.enrichment import CountrySnapshot

logger = get_logger(__name__)

IMPORT_BATCH_SIZE = 5


async def create_destination(db: AsyncSession, data: DestinationCreate) -> Destination:
    destination = Destination(
        id=uuid.uuid4(),
        country_name=data.country_name,
        city=data.city,
        latitude=data.latitude,
        longitude=data.longitude,
        iso_code=data.iso_code.upper(),
        default_currency=data.default_currency.upper(),
    )
    db.add(destination)
    await db.flush()
    await db.refresh(destination)

    logger.info("destination_created", destination_id=str(destination.id), city=destination.city)
    return destination


async def get_destination(db: AsyncSession, destination_id: uuid.UUID) -> Optional[Destination]:
    result = await db.execute(select(Destination).where(Destination.id == destination_id))
    return result.scalar_one_or_none()


async def list_destinations(
    db: AsyncSession,
    country: Optional[str] = None,
    city: Optional[str] = None,
) -> list[Destination]:
    query = select(Destination)
    if country and country.strip():
        query = query.where(Destination.country_name == country.strip())
    if city and city.strip():
        query = query.where(Destination.city == city.strip())
    result = await db.execute(query.order_by(Destination.city.asc()))
    return list(result.scalars().all())


async def update_destination(
    db: AsyncSession,
    destination_id: uuid.UUID,
    data: DestinationUpdate,
) -> Result[Destination]:
    destination = await get_destination(db, destination_id)
    if destination is None:
        return Result.failure(DestinationNotFoundError(destination_id))

    changes = data.model_dump(exclude_unset=True)
    for code_field in ("iso_code", "default_currency"):
        if changes.get(code_field):
            changes[code_field] = changes[code_field].upper()
    for field, value in changes.items():
        setattr(destination, field, value)
    await db.flush()

    logger.info("destination_updated", destination_id=str(destination.id))
    return Result.success(destination)


async def delete_destination(db: AsyncSession, destination_id: uuid.UUID) -> Result[None]:
    destination = await get_destination(db, destination_id)
    if destination is None:
        return Result.failure(DestinationNotFoundError(destination_id))

    packages = await db.execute(select(func.count()).where(Package.destination_id == destination_id))
    count = packages.scalar_one()
    if count:
        return Result.failure(InUseError("Destination", "packages", count))

    await db.delete(destination)
    await db.flush()
    logger.info("destination_deleted", destination_id=str(destination_id))
    return Result.success()


async def get_country_snapshot(
    db: AsyncSession,
    destination_id: uuid.UUID,
    countries: CountryClient,
) -> Optional[CountrySnapshot]:
    destination = await get_destination(db, destination_id)
    if destination is None:
        return None
    return await countries.get_snapshot(destination.country_name)


async def import_countries(
    db: AsyncSession,
    countries: CountryClient,
    limit: int = IMPORT_BATCH_SIZE,
) -> int:
    """
    Create a destination at the capital of each country returned by the
    country API, up to `limit`, skipping ISO codes that already exist.
    """
    imported = 0
    for country in (await countries.get_all_for_import())[:limit]:
        if not country.iso_code:
            continue
        existing = await db.execute(
            select(Destination.id).where(Destination.iso_code == country.iso_code.upper()).limit(1)
        )
        if existing.scalar_one_or_none() is not None:
            continue

        db.add(
            Destination(
                id=uuid.uuid4(),
                country_name=country.name,
                city=country.capital or "N/A",
                iso_code=country.iso_code.upper(),
                default_currency=country.currency_code or "USD",
                latitude=country.latitude,
                longitude=country.longitude,
            )
        )
        imported += 1

    await db.flush()
    logger.info("countries_imported", count=imported)
    return imported
