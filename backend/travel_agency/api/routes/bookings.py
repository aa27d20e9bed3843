"""
Booking endpoints. Seat reservation is concurrency-safe: the booking engine
decrements the package's live counter with a guarded UPDATE.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.api.deps import get_exchange_rates
from travel_agency.db.session import get_db
from travel_agency.domain.errors import BookingNotFoundError
from travel_agency.infrastructure import ExchangeRateClient
from travel_agency.schemas.booking import (
    BookingCancelResponse,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
)
from travel_agency.schemas.enrichment import PriceQuote
from travel_agency.services import booking_service
from travel_agency.services.cache_service import mark_packages_changed

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Book seats in a package for an existing customer.
    Returns 409 with the remaining seat count when the package cannot hold
    the party.
    """
    booking = (
        await booking_service.create_booking(
            db, booking_data.customer_id, booking_data.package_id, booking_data.people_count
        )
    ).unwrap()
    # Listings are dropped once the new seat count commits
    mark_packages_changed(db)
    return booking


@router.get("/", response_model=list[BookingResponse])
async def list_bookings_endpoint(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.list_bookings(db, status_filter)


@router.get("/mine", response_model=list[BookingResponse])
async def my_bookings_endpoint(
    email: EmailStr = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Bookings of the customer owning an e-mail address."""
    return await booking_service.list_bookings_for_email(db, email)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking_endpoint(booking_id: UUID, db: AsyncSession = Depends(get_db)):
    booking = await booking_service.get_booking(db, booking_id)
    if booking is None:
        raise BookingNotFoundError(booking_id)
    return booking


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status_endpoint(
    booking_id: UUID,
    status_data: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    booking = (await booking_service.update_booking_status(db, booking_id, status_data.status)).unwrap()
    mark_packages_changed(db)
    return booking


@router.post("/{booking_id}/cancel", response_model=BookingCancelResponse)
async def cancel_booking_endpoint(booking_id: UUID, db: AsyncSession = Depends(get_db)):
    """Cancel a booking and release seats back to the package."""
    booking = (await booking_service.cancel_booking(db, booking_id)).unwrap()
    mark_packages_changed(db)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.status,
    )


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def delete_booking_endpoint(booking_id: UUID, db: AsyncSession = Depends(get_db)):
    """
    Administrative delete. The record is kept as Cancelled so the seat
    ledger stays auditable.
    """
    return await cancel_booking_endpoint(booking_id, db)


@router.get("/{booking_id}/convert", response_model=PriceQuote)
async def convert_booking_total_endpoint(
    booking_id: UUID,
    to: Optional[str] = Query(None, max_length=3),
    db: AsyncSession = Depends(get_db),
    fx: ExchangeRateClient = Depends(get_exchange_rates),
):
    """Quote the frozen booking total in another currency."""
    return (await booking_service.convert_total(db, booking_id, to, fx)).unwrap()
