"""
Tests for the seat inventory ledger.
"""

import uuid

import pytest
from sqlalchemy import select

from travel_agency.domain.errors import (
    CapacityConflictError,
    InsufficientCapacityError,
    InvalidQuantityError,
    PackageNotFoundError,
)
from travel_agency.models.package import Package
from travel_agency.services import booking_service, inventory_service


async def _version(db_session, package_id) -> int:
    result = await db_session.execute(select(Package.version).where(Package.id == package_id))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_remaining_seats(db_session, test_package):
    assert await inventory_service.remaining_seats(db_session, test_package.id) == 10


@pytest.mark.asyncio
async def test_remaining_seats_unknown_package_is_zero(db_session):
    assert await inventory_service.remaining_seats(db_session, uuid.uuid4()) == 0


@pytest.mark.asyncio
async def test_reserve_decrements_and_bumps_version(db_session, test_package):
    before = await _version(db_session, test_package.id)

    result = await inventory_service.reserve_seats(db_session, test_package.id, 4)
    await db_session.commit()

    assert result.ok
    assert result.value == 6
    assert await inventory_service.remaining_seats(db_session, test_package.id) == 6
    assert await _version(db_session, test_package.id) == before + 1


@pytest.mark.asyncio
async def test_reserve_exact_remaining_empties_package(db_session, test_package):
    result = await inventory_service.reserve_seats(db_session, test_package.id, 10)

    assert result.ok
    assert result.value == 0


@pytest.mark.asyncio
async def test_reserve_more_than_remaining_is_rejected(db_session, test_package):
    result = await inventory_service.reserve_seats(db_session, test_package.id, 11)

    assert not result.ok
    assert isinstance(result.error, InsufficientCapacityError)
    assert result.error.remaining == 10
    assert await inventory_service.remaining_seats(db_session, test_package.id) == 10


@pytest.mark.asyncio
async def test_reserve_on_sold_out_package(db_session, sold_out_package):
    result = await inventory_service.reserve_seats(db_session, sold_out_package.id, 1)

    assert isinstance(result.error, InsufficientCapacityError)
    assert result.error.remaining == 0


@pytest.mark.asyncio
async def test_reserve_unknown_package(db_session):
    result = await inventory_service.reserve_seats(db_session, uuid.uuid4(), 1)
    assert isinstance(result.error, PackageNotFoundError)


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, -3])
async def test_reserve_non_positive_count(db_session, test_package, count):
    result = await inventory_service.reserve_seats(db_session, test_package.id, count)
    assert isinstance(result.error, InvalidQuantityError)


@pytest.mark.asyncio
async def test_release_restores_seats(db_session, test_package):
    await inventory_service.reserve_seats(db_session, test_package.id, 3)
    await inventory_service.release_seats(db_session, test_package.id, 3)
    await db_session.commit()

    assert await inventory_service.remaining_seats(db_session, test_package.id) == 10


@pytest.mark.asyncio
async def test_audit_is_consistent_after_bookings(db_session, test_package, test_customer):
    await booking_service.create_booking(db_session, test_customer.id, test_package.id, 3)
    await booking_service.create_booking(db_session, test_customer.id, test_package.id, 2)
    await db_session.commit()

    audit = await inventory_service.audit_seats(db_session, test_package.id)

    assert audit.seat_count == 10
    assert audit.booked_seats == 5
    assert audit.available_seats == 5
    assert audit.consistent


@pytest.mark.asyncio
async def test_audit_ignores_cancelled_bookings(db_session, test_package, test_customer):
    booking = (await booking_service.create_booking(db_session, test_customer.id, test_package.id, 4)).value
    await booking_service.cancel_booking(db_session, booking.id)
    await db_session.commit()

    audit = await inventory_service.audit_seats(db_session, test_package.id)

    assert audit.booked_seats == 0
    assert audit.available_seats == 10
    assert audit.consistent


@pytest.mark.asyncio
async def test_audit_unknown_package(db_session):
    assert await inventory_service.audit_seats(db_session, uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_adjust_capacity_moves_counter_by_delta(db_session, test_package, test_customer):
    await booking_service.create_booking(db_session, test_customer.id, test_package.id, 4)

    grown = await inventory_service.adjust_capacity(db_session, test_package.id, 15)
    assert grown.value == 11

    shrunk = await inventory_service.adjust_capacity(db_session, test_package.id, 4)
    assert shrunk.value == 0

    audit = await inventory_service.audit_seats(db_session, test_package.id)
    assert audit.seat_count == 4
    assert audit.consistent


@pytest.mark.asyncio
async def test_adjust_capacity_below_booked_is_rejected(db_session, test_package, test_customer):
    await booking_service.create_booking(db_session, test_customer.id, test_package.id, 6)

    result = await inventory_service.adjust_capacity(db_session, test_package.id, 5)

    assert isinstance(result.error, CapacityConflictError)
    assert result.error.booked == 6
    assert await inventory_service.remaining_seats(db_session, test_package.id) == 4
