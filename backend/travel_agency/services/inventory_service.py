"""
Seat inventory ledger.

CONCURRENCY STRATEGY: Conditional Decrement
===========================================

Problem:
  Two customers check out the last seats of a package simultaneously.
  Both read available_seats=2, both write available_seats=0, both succeed.
  Result: Overbooking.

Solution:
  The live counter on the package row is decremented with a single
  conditional UPDATE:

    UPDATE packages
       SET available_seats = available_seats - :n, version = version + 1
     WHERE id = :package_id AND available_seats >= :n

  The database evaluates the guard and the write as one statement under its
  row lock, so concurrent reservations serialize on the row and the one that
  would overdraw the counter matches no row. rowcount == 0 means "not enough
  seats right now"; no retry is needed because the guard does not depend on
  a previously read version. The CHECK constraint (available_seats >= 0) is
  the final safety net.

  `available_seats` is the source of truth. Summing non-cancelled bookings
  is kept only as an audit against the configured `seat_count`.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.core.logging import get_logger
from travel_agency.core.metrics import seat_reservation_conflicts
from travel_agency.domain.errors import (
    CapacityConflictError,
    InsufficientCapacityError,
    InvalidQuantityError,
    PackageNotFoundError,
)
from travel_agency.domain.results import Result
from travel_agency.models.booking import Booking, BookingStatus
from travel_agency.models.package import Package

logger = get_logger(__name__)


@dataclass(frozen=True)
class SeatAudit:
    package_id: uuid.UUID
    seat_count: int
    available_seats: int
    booked_seats: int

    @property
    def consistent(self) -> bool:
        return self.seat_count - self.booked_seats == self.available_seats


async def _read_available(db: AsyncSession, package_id: uuid.UUID) -> Optional[int]:
    # Column select so a stale instance in the identity map is never consulted
    result = await db.execute(select(Package.available_seats).where(Package.id == package_id))
    return result.scalar_one_or_none()


async def remaining_seats(db: AsyncSession, package_id: uuid.UUID) -> int:
    """Live remaining capacity, 0 for unknown packages."""
    available = await _read_available(db, package_id)
    if available is None:
        return 0
    return max(0, available)


async def reserve_seats(db: AsyncSession, package_id: uuid.UUID, count: int) -> Result[int]:
    """
    Atomically take `count` seats from a package.
    Returns the new remaining count. Does not commit.
    """
    if count <= 0:
        return Result.failure(InvalidQuantityError(count))

    update_result = await db.execute(
        update(Package)
        .where(Package.id == package_id, Package.available_seats >= count)
        .values(
            available_seats=Package.available_seats - count,
            version=Package.version + 1,
        )
        .execution_options(synchronize_session=False)
    )

    if update_result.rowcount == 0:
        available = await _read_available(db, package_id)
        if available is None:
            return Result.failure(PackageNotFoundError(package_id))

        seat_reservation_conflicts.inc()
        remaining = max(0, available)
        logger.warning(
            "seat_reservation_rejected",
            package_id=str(package_id),
            requested=count,
            available=remaining,
        )
        return Result.failure(InsufficientCapacityError(remaining))

    remaining = await remaining_seats(db, package_id)
    logger.debug("seats_reserved", package_id=str(package_id), seats=count, remaining=remaining)
    return Result.success(remaining)


async def release_seats(db: AsyncSession, package_id: uuid.UUID, count: int) -> None:
    """Give seats back to a package, e.g. on cancellation. Does not commit."""
    if count <= 0:
        return
    await db.execute(
        update(Package)
        .where(Package.id == package_id)
        .values(
            available_seats=Package.available_seats + count,
            version=Package.version + 1,
        )
        .execution_options(synchronize_session=False)
    )
    logger.debug("seats_released", package_id=str(package_id), seats=count)


async def booked_seats(db: AsyncSession, package_id: uuid.UUID) -> int:
    """Sum of people over all non-cancelled bookings of a package."""
    result = await db.execute(
        select(func.coalesce(func.sum(Booking.people_count), 0)).where(
            Booking.package_id == package_id,
            Booking.status != BookingStatus.CANCELLED.value,
        )
    )
    return int(result.scalar_one())


async def audit_seats(db: AsyncSession, package_id: uuid.UUID) -> Optional[SeatAudit]:
    """Reconcile the live counter against configured capacity minus bookings."""
    result = await db.execute(
        select(Package.seat_count, Package.available_seats).where(Package.id == package_id)
    )
    row = result.one_or_none()
    if row is None:
        return None

    audit = SeatAudit(
        package_id=package_id,
        seat_count=row.seat_count,
        available_seats=row.available_seats,
        booked_seats=await booked_seats(db, package_id),
    )
    if not audit.consistent:
        logger.warning(
            "seat_audit_mismatch",
            package_id=str(package_id),
            seat_count=audit.seat_count,
            available=audit.available_seats,
            booked=audit.booked_seats,
        )
    return audit


async def adjust_capacity(db: AsyncSession, package_id: uuid.UUID, new_seat_count: int) -> Result[int]:
    """
    Change the configured capacity of a package and shift the live counter
    by the same delta, refusing to go below what is already taken.
    Returns the new remaining count. Does not commit.
    """
    if new_seat_count < 0:
        return Result.failure(InvalidQuantityError(new_seat_count))

    result = await db.execute(select(Package.seat_count).where(Package.id == package_id))
    current = result.scalar_one_or_none()
    if current is None:
        return Result.failure(PackageNotFoundError(package_id))

    delta = new_seat_count - current
    update_result = await db.execute(
        update(Package)
        .where(
            Package.id == package_id,
            Package.seat_count == current,
            Package.available_seats + delta >= 0,
        )
        .values(
            seat_count=new_seat_count,
            available_seats=Package.available_seats + delta,
            version=Package.version + 1,
        )
        .execution_options(synchronize_session=False)
    )
    if update_result.rowcount == 0:
        available = await remaining_seats(db, package_id)
        return Result.failure(CapacityConflictError(booked=current - available, requested=new_seat_count))

    logger.info("package_capacity_adjusted", package_id=str(package_id), seat_count=new_seat_count, delta=delta)
    return Result.success(await remaining_seats(db, package_id))
