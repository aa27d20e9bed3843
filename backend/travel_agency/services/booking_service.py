"""
Booking engine: the only writer that turns (customer, package, people) into
a persisted booking plus an inventory decrement.

Both writes (seat decrement, booking insert) happen on the caller's session
and are only flushed here. The caller commits, so they land together or not
at all. Expected business outcomes come back as a `Result`; storage errors
propagate.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.core.config import get_settings
from travel_agency.core.logging import get_logger
from travel_agency.core.metrics import booking_cancellations, booking_latency, record_booking_attempt
from travel_agency.domain import pricing
from travel_agency.domain.errors import (
    BookingNotFoundError,
    ConversionUnavailableError,
    CustomerNotFoundError,
    InvalidQuantityError,
    InvalidStatusTransitionError,
    PackageNotFoundError,
)
from travel_agency.domain.results import Result
from travel_agency.infrastructure.exchange_rates import ExchangeRateClient
from travel_agency.models.booking import Booking, BookingStatus
from travel_agency.models.customer import Customer
from travel_agency.models.destination import Destination
from travel_agency.models.package import Package
from travel_agency.schemas.enrichment import PriceQuote
from travel_agency.services import inventory_service

logger = get_logger(__name__)


def normalize_status(status: str) -> str:
    """Map known statuses to their canonical spelling; keep anything else as given."""
    value = status.strip()
    for known in BookingStatus:
        if known.value.lower() == value.lower():
            return known.value
    return value


async def create_booking(
    db: AsyncSession,
    customer_id: uuid.UUID,
    package_id: uuid.UUID,
    people_count: int,
) -> Result[Booking]:
    """
    Reserve `people_count` seats in a package for a customer.
    The price is frozen at booking time.
    """
    started = time.perf_counter()

    if people_count <= 0:
        record_booking_attempt("invalid_quantity")
        return Result.failure(InvalidQuantityError(people_count))

    result = await db.execute(select(Package.base_price).where(Package.id == package_id))
    base_price = result.scalar_one_or_none()
    if base_price is None:
        record_booking_attempt("package_not_found")
        return Result.failure(PackageNotFoundError(package_id))

    customer_exists = await db.execute(select(Customer.id).where(Customer.id == customer_id))
    if customer_exists.scalar_one_or_none() is None:
        record_booking_attempt("customer_not_found")
        return Result.failure(CustomerNotFoundError(customer_id))

    reservation = await inventory_service.reserve_seats(db, package_id, people_count)
    if not reservation.ok:
        record_booking_attempt("insufficient_capacity")
        logger.warning(
            "booking_failed_no_seats",
            package_id=str(package_id),
            requested=people_count,
            error=reservation.error.message,
        )
        return Result.failure(reservation.error)

    booking = Booking(
        id=uuid.uuid4(),
        package_id=package_id,
        customer_id=customer_id,
        people_count=people_count,
        total_base_price=pricing.line_total(base_price, people_count),
        status=BookingStatus.CONFIRMED.value,
        created_at=datetime.now(timezone.utc),
    )
    db.add(booking)
    await db.flush()

    booking_latency.observe(time.perf_counter() - started)
    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=str(booking.id),
        customer_id=str(customer_id),
        package_id=str(package_id),
        seats=people_count,
        remaining=reservation.value,
    )
    return Result.success(booking)


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Optional[Booking]:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    return result.scalar_one_or_none()


async def list_bookings(db: AsyncSession, status: Optional[str] = None) -> list[Booking]:
    """All bookings, newest first."""
    query = select(Booking)
    if status:
        query = query.where(Booking.status == normalize_status(status))
    result = await db.execute(query.order_by(Booking.created_at.desc()))
    return list(result.scalars().all())


async def list_bookings_for_email(db: AsyncSession, email: str) -> list[Booking]:
    """Bookings of the customer owning an e-mail address, newest first."""
    result = await db.execute(
        select(Booking)
        .join(Customer, Customer.id == Booking.customer_id)
        .where(func.lower(Customer.email) == email.strip().lower())
        .order_by(Booking.created_at.desc())
    )
    return list(result.scalars().all())


async def count_booked_seats(db: AsyncSession, package_id: uuid.UUID) -> int:
    """Seats held by non-cancelled bookings. Audit figure, not the live counter."""
    return await inventory_service.booked_seats(db, package_id)


async def convert_total(
    db: AsyncSession,
    booking_id: uuid.UUID,
    target_currency: Optional[str],
    fx: ExchangeRateClient,
) -> Result[PriceQuote]:
    """
    Quote a booking's frozen total in another currency. The source currency
    is the default currency of the package's destination.
    """
    result = await db.execute(
        select(Booking.total_base_price, Destination.default_currency)
        .join(Package, Package.id == Booking.package_id, isouter=True)
        .join(Destination, Destination.id == Package.destination_id, isouter=True)
        .where(Booking.id == booking_id)
    )
    row = result.one_or_none()
    if row is None:
        return Result.failure(BookingNotFoundError(booking_id))

    source = row.default_currency or get_settings().DEFAULT_CURRENCY
    target = (target_currency or "").strip().upper() or source

    quote = await fx.convert(source, target, row.total_base_price)
    if quote is None:
        return Result.failure(ConversionUnavailableError(source, target))
    return Result.success(quote)


async def cancel_booking(db: AsyncSession, booking_id: uuid.UUID) -> Result[Booking]:
    """
    Soft-cancel a booking: the row is kept with status Cancelled and its
    seats go back to the package.
    """
    booking = await get_booking(db, booking_id)
    if booking is None:
        return Result.failure(BookingNotFoundError(booking_id))

    # Conditional status flip so two concurrent cancels release seats once
    update_result = await db.execute(
        update(Booking)
        .where(Booking.id == booking_id, Booking.status != BookingStatus.CANCELLED.value)
        .values(status=BookingStatus.CANCELLED.value)
        .execution_options(synchronize_session=False)
    )
    if update_result.rowcount == 0:
        return Result.failure(
            InvalidStatusTransitionError(BookingStatus.CANCELLED.value, BookingStatus.CANCELLED.value)
        )

    await inventory_service.release_seats(db, booking.package_id, booking.people_count)
    await db.refresh(booking, attribute_names=["status"])

    booking_cancellations.inc()
    logger.info(
        "booking_cancelled",
        booking_id=str(booking.id),
        package_id=str(booking.package_id),
        seats_restored=booking.people_count,
    )
    return Result.success(booking)


async def update_booking_status(db: AsyncSession, booking_id: uuid.UUID, status: str) -> Result[Booking]:
    """
    Administrative status change. Cancelling releases seats; a cancelled
    booking cannot be revived because its seats may be gone.
    """
    new_status = normalize_status(status)
    if new_status == BookingStatus.CANCELLED.value:
        return await cancel_booking(db, booking_id)

    booking = await get_booking(db, booking_id)
    if booking is None:
        return Result.failure(BookingNotFoundError(booking_id))
    if booking.is_cancelled:
        return Result.failure(InvalidStatusTransitionError(booking.status, new_status))

    previous = booking.status
    booking.status = new_status
    await db.flush()

    logger.info("booking_status_changed", booking_id=str(booking.id), previous=previous, status=new_status)
    return Result.success(booking)
