"""
Destination endpoints, including country metadata and bulk import.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.api.deps import get_countries
from travel_agency.db.session import get_db
from travel_agency.domain.errors import DestinationNotFoundError
from travel_agency.infrastructure import CountryClient
from travel_agency.schemas.destination import (
    DestinationCreate,
    DestinationImportResponse,
    DestinationResponse,
    DestinationUpdate,
)
from travel_agency.schemas.enrichment import CountrySnapshot
from travel_agency.services import destination_service

router = APIRouter(prefix="/destinations", tags=["Destinations"])


@router.post("/", response_model=DestinationResponse, status_code=status.HTTP_201_CREATED)
async def create_destination_endpoint(
    destination_data: DestinationCreate,
    db: AsyncSession = Depends(get_db),
):
    return await destination_service.create_destination(db, destination_data)


@router.get("/", response_model=list[DestinationResponse])
async def list_destinations_endpoint(
    country: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await destination_service.list_destinations(db, country, city)


@router.post("/import", response_model=DestinationImportResponse)
async def import_destinations_endpoint(
    db: AsyncSession = Depends(get_db),
    countries: CountryClient = Depends(get_countries),
):
    """Seed destinations from the country API, one per capital."""
    imported = await destination_service.import_countries(db, countries)
    return DestinationImportResponse(imported=imported)


@router.get("/{destination_id}", response_model=DestinationResponse)
async def get_destination_endpoint(destination_id: UUID, db: AsyncSession = Depends(get_db)):
    destination = await destination_service.get_destination(db, destination_id)
    if destination is None:
        raise DestinationNotFoundError(destination_id)
    return destination


@router.put("/{destination_id}", response_model=DestinationResponse)
async def update_destination_endpoint(
    destination_id: UUID,
    destination_data: DestinationUpdate,
    db: AsyncSession = Depends(get_db),
):
    return (await destination_service.update_destination(db, destination_id, destination_data)).unwrap()


@router.delete("/{destination_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_destination_endpoint(destination_id: UUID, db: AsyncSession = Depends(get_db)):
    (await destination_service.delete_destination(db, destination_id)).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{destination_id}/country", response_model=Optional[CountrySnapshot])
async def country_snapshot_endpoint(
    destination_id: UUID,
    db: AsyncSession = Depends(get_db),
    countries: CountryClient = Depends(get_countries),
):
    """Country facts for a destination; null when the country API has none."""
    if await destination_service.get_destination(db, destination_id) is None:
        raise DestinationNotFoundError(destination_id)
    return await destination_service.get_country_snapshot(db, destination_id, countries)
