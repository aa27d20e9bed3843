"""
Package endpoints: catalogue CRUD, live seat counts and enrichment.
Listings are cached in Redis; single-package reads are not.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.api.deps import get_exchange_rates, get_holidays, get_weather
from travel_agency.core.logging import get_logger
from travel_agency.db.session import get_db
from travel_agency.domain.errors import PackageNotFoundError
from travel_agency.infrastructure import ExchangeRateClient, HolidayClient, WeatherClient
from travel_agency.schemas.enrichment import PriceQuote, PublicHoliday, WeatherWindow
from travel_agency.schemas.package import (
    PackageCreate,
    PackageListResponse,
    PackageResponse,
    PackageUpdate,
    RemainingSeatsResponse,
    SeatAuditResponse,
)
from travel_agency.services import inventory_service, package_service
from travel_agency.services.cache_service import (
    get_cached_packages,
    make_package_list_key,
    mark_packages_changed,
    set_cached_packages,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/packages", tags=["Packages"])


async def _require_package(db: AsyncSession, package_id: UUID):
    package = await package_service.get_package(db, package_id, fresh=True)
    if package is None:
        raise PackageNotFoundError(package_id)
    return package


@router.post("/", response_model=PackageResponse, status_code=status.HTTP_201_CREATED)
async def create_package_endpoint(
    package_data: PackageCreate,
    db: AsyncSession = Depends(get_db),
):
    package = (await package_service.create_package(db, package_data)).unwrap()
    mark_packages_changed(db)
    return package


@router.get("/", response_model=PackageListResponse)
async def list_packages_endpoint(
    destination_id: Optional[UUID] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    List packages by start date, optionally filtered by destination and by
    a date range they overlap. Results are cached in Redis for 5 minutes.
    """
    key = make_package_list_key(destination_id, date_from, date_to)
    cached = await get_cached_packages(key)
    if cached:
        logger.info("packages_list_cache_hit", key=key)
        cached["cached"] = True
        return PackageListResponse(**cached)

    packages = await package_service.list_packages(db, destination_id, date_from, date_to)
    response_data = {
        "packages": [PackageResponse.model_validate(p).model_dump(mode="json") for p in packages],
        "total": len(packages),
        "cached": False,
    }
    await set_cached_packages(key, response_data)

    return PackageListResponse(**response_data)


@router.get("/{package_id}", response_model=PackageResponse)
async def get_package_endpoint(package_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get a single package. Not cached (needs real-time seat counts)."""
    return await _require_package(db, package_id)


@router.put("/{package_id}", response_model=PackageResponse)
async def update_package_endpoint(
    package_id: UUID,
    package_data: PackageUpdate,
    db: AsyncSession = Depends(get_db),
):
    package = (await package_service.update_package(db, package_id, package_data)).unwrap()
    mark_packages_changed(db)
    return package


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package_endpoint(package_id: UUID, db: AsyncSession = Depends(get_db)):
    (await package_service.delete_package(db, package_id)).unwrap()
    mark_packages_changed(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{package_id}/remaining", response_model=RemainingSeatsResponse)
async def remaining_seats_endpoint(package_id: UUID, db: AsyncSession = Depends(get_db)):
    remaining = await inventory_service.remaining_seats(db, package_id)
    return RemainingSeatsResponse(package_id=package_id, remaining=remaining)


@router.get("/{package_id}/audit", response_model=SeatAuditResponse)
async def seat_audit_endpoint(package_id: UUID, db: AsyncSession = Depends(get_db)):
    """Compare the live seat counter with capacity minus active bookings."""
    audit = await inventory_service.audit_seats(db, package_id)
    if audit is None:
        raise PackageNotFoundError(package_id)
    return SeatAuditResponse(
        package_id=audit.package_id,
        seat_count=audit.seat_count,
        available_seats=audit.available_seats,
        booked_seats=audit.booked_seats,
        consistent=audit.consistent,
    )


@router.get("/{package_id}/weather", response_model=Optional[WeatherWindow])
async def weather_endpoint(
    package_id: UUID,
    db: AsyncSession = Depends(get_db),
    weather: WeatherClient = Depends(get_weather),
):
    """Forecast summary for the travel window; null when unavailable."""
    await _require_package(db, package_id)
    return await package_service.get_weather_window(db, package_id, weather)


@router.get("/{package_id}/holidays", response_model=list[PublicHoliday])
async def holidays_endpoint(
    package_id: UUID,
    db: AsyncSession = Depends(get_db),
    holidays: HolidayClient = Depends(get_holidays),
):
    await _require_package(db, package_id)
    return await package_service.get_holidays(db, package_id, holidays)


@router.get("/{package_id}/quote", response_model=PriceQuote)
async def price_quote_endpoint(
    package_id: UUID,
    to: Optional[str] = Query(None, max_length=3),
    db: AsyncSession = Depends(get_db),
    fx: ExchangeRateClient = Depends(get_exchange_rates),
):
    return (await package_service.get_price_quote(db, package_id, to, fx)).unwrap()
