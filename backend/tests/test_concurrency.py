"""
Concurrency tests: independent sessions racing for the same seats, the way
simultaneous requests do. None of them may overbook a package.
"""

import asyncio

import pytest
from sqlalchemy import func, select

from travel_agency.domain.cart import Cart
from travel_agency.domain.errors import InsufficientCapacityError
from travel_agency.models import Booking, Customer
from travel_agency.services import booking_service, cart_service, inventory_service


async def _make_customers(session_factory, n: int) -> list:
    async with session_factory() as session:
        customers = [
            Customer(first_name=f"Buyer {i}", last_name="", email=f"buyer{i}@example.com")
            for i in range(n)
        ]
        session.add_all(customers)
        await session.commit()
        return [c.id for c in customers]


async def _book(session_factory, customer_id, package_id, seats):
    async with session_factory() as session:
        result = await booking_service.create_booking(session, customer_id, package_id, seats)
        if result.ok:
            await session.commit()
        return result


async def _bookings_for(session_factory, package_id) -> int:
    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(Booking).where(Booking.package_id == package_id)
        )
        return result.scalar_one()


@pytest.mark.asyncio
async def test_concurrent_single_seat_bookings_never_overbook(session_factory, test_package):
    """12 buyers race for 10 seats: exactly 10 win."""
    customer_ids = await _make_customers(session_factory, 12)

    results = await asyncio.gather(
        *[_book(session_factory, cid, test_package.id, 1) for cid in customer_ids]
    )

    succeeded = [r for r in results if r.ok]
    rejected = [r for r in results if not r.ok]
    assert len(succeeded) == 10
    assert len(rejected) == 2
    assert all(isinstance(r.error, InsufficientCapacityError) for r in rejected)

    async with session_factory() as session:
        assert await inventory_service.remaining_seats(session, test_package.id) == 0
        audit = await inventory_service.audit_seats(session, test_package.id)
    assert audit.consistent
    assert await _bookings_for(session_factory, test_package.id) == 10


@pytest.mark.asyncio
async def test_concurrent_group_bookings_never_overbook(session_factory, test_package):
    """8 parties of 3 race for 10 seats: 3 fit, one seat is left over."""
    customer_ids = await _make_customers(session_factory, 8)

    results = await asyncio.gather(
        *[_book(session_factory, cid, test_package.id, 3) for cid in customer_ids]
    )

    assert sum(1 for r in results if r.ok) == 3
    async with session_factory() as session:
        assert await inventory_service.remaining_seats(session, test_package.id) == 1
    assert await _bookings_for(session_factory, test_package.id) == 3


@pytest.mark.asyncio
async def test_concurrent_checkouts_for_last_seats(session_factory, make_package):
    """Two carts want 2 of the last 3 seats; one checkout wins."""
    package = await make_package("Last Seats", seats=3)

    async def checkout(email):
        cart = Cart()
        async with session_factory() as session:
            await cart_service.add_to_cart(session, cart, package.id, 2)
            return await cart_service.checkout(session, cart, email)

    results = await asyncio.gather(checkout("first@example.com"), checkout("second@example.com"))

    assert sum(1 for r in results if r.ok) == 1
    async with session_factory() as session:
        assert await inventory_service.remaining_seats(session, package.id) == 1
    assert await _bookings_for(session_factory, package.id) == 1


@pytest.mark.asyncio
async def test_concurrent_cancellations_release_seats_once(session_factory, test_package):
    [customer_id] = await _make_customers(session_factory, 1)
    booking = (await _book(session_factory, customer_id, test_package.id, 4)).value

    async def cancel():
        async with session_factory() as session:
            result = await booking_service.cancel_booking(session, booking.id)
            if result.ok:
                await session.commit()
            return result

    results = await asyncio.gather(cancel(), cancel())

    assert sum(1 for r in results if r.ok) == 1
    async with session_factory() as session:
        assert await inventory_service.remaining_seats(session, test_package.id) == 10


@pytest.mark.asyncio
async def test_concurrent_first_checkouts_share_one_customer(session_factory, test_package):
    """Two first-time checkouts for one e-mail both complete against a single customer."""

    async def checkout():
        cart = Cart()
        async with session_factory() as session:
            await cart_service.add_to_cart(session, cart, test_package.id, 1)
            return await cart_service.checkout(session, cart, "new@example.com")

    results = await asyncio.gather(checkout(), checkout())

    assert all(r.ok for r in results)
    assert results[0].value.customer_id == results[1].value.customer_id
    async with session_factory() as session:
        customers = (await session.execute(select(func.count()).select_from(Customer))).scalar_one()
        assert customers == 1
        assert await inventory_service.remaining_seats(session, test_package.id) == 8
