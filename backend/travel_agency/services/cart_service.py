"""
Cart staging and multi-item checkout.

CHECKOUT FLOW
=============

1. Empty carts are rejected.
2. The customer is looked up by e-mail, or created with a minimal record.
3. Pre-flight: every staged item is compared with the live remaining seat
   count. The first item that does not fit aborts the checkout with the cart
   untouched and nothing booked. This pass is advisory only: another
   customer can take the seats between it and the commit pass.
4. Commit: `create_booking` runs once per item in staging order and
   re-validates capacity atomically.

What happens when a commit-pass booking fails depends on `atomic`:

  - Per item (default): each booking is committed as soon as it is made and
    its item leaves the cart. A failure stops the batch; earlier bookings
    stay committed and the failing and later items stay in the cart. The
    error lists the committed booking ids.
  - Atomic: every booking shares one transaction. A failure rolls all of
    them back and leaves the cart untouched.

Cancelling the request mid-checkout stops further bookings. Per-item mode
keeps the ones already committed.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.core.logging import get_logger
from travel_agency.core.metrics import record_checkout
from travel_agency.domain import pricing
from travel_agency.domain.cart import Cart, CartItem
from travel_agency.domain.errors import (
    CheckoutFailedError,
    EmptyCartError,
    InsufficientCapacityError,
    PackageNotFoundError,
)
from travel_agency.domain.results import Result
from travel_agency.models.package import Package
from travel_agency.services import booking_service, customer_service, inventory_service

logger = get_logger(__name__)


@dataclass
class CheckoutReceipt:
    customer_id: uuid.UUID
    booking_ids: list[uuid.UUID] = field(default_factory=list)
    total: Decimal = Decimal("0")


async def add_to_cart(db: AsyncSession, cart: Cart, package_id: uuid.UUID, count: int = 1) -> Result[CartItem]:
    """Stage a package, snapshotting its current title and price."""
    result = await db.execute(select(Package.title, Package.base_price).where(Package.id == package_id))
    row = result.one_or_none()
    if row is None:
        return Result.failure(PackageNotFoundError(package_id))

    item = cart.stage(package_id, row.title, row.base_price, count)
    logger.info("cart_item_staged", package_id=str(package_id), people=item.people_count)
    return Result.success(item)


def remove_from_cart(cart: Cart, package_id: uuid.UUID) -> None:
    cart.remove(package_id)


def cart_totals(cart: Cart) -> tuple[Decimal, Decimal]:
    """(subtotal, grand total) of the staged items."""
    lines = [(i.unit_price, i.people_count) for i in cart.items]
    return pricing.subtotal(lines), pricing.grand_total(lines)


async def _preflight(db: AsyncSession, cart: Cart) -> Result[None]:
    for item in cart.items:
        remaining = await inventory_service.remaining_seats(db, item.package_id)
        if item.people_count > remaining:
            logger.info(
                "checkout_preflight_rejected",
                package_id=str(item.package_id),
                requested=item.people_count,
                remaining=remaining,
            )
            return Result.failure(InsufficientCapacityError(remaining, title=item.title))
    return Result.success()


async def checkout(db: AsyncSession, cart: Cart, email: str, atomic: bool = False) -> Result[CheckoutReceipt]:
    """Turn every staged item into a booking for the customer owning `email`."""
    if cart.is_empty:
        record_checkout("empty_cart")
        return Result.failure(EmptyCartError())

    customer = await customer_service.get_or_create_by_email(db, email)
    # Read before any rollback expires the instance
    customer_id = customer.id
    if not atomic:
        await db.commit()

    preflight = await _preflight(db, cart)
    if not preflight.ok:
        record_checkout("preflight_rejected")
        return Result.failure(preflight.error)

    receipt = CheckoutReceipt(customer_id=customer_id, total=cart.total)
    for item in list(cart.items):
        booked = await booking_service.create_booking(db, customer_id, item.package_id, item.people_count)

        if not booked.ok:
            if atomic:
                await db.rollback()
                record_checkout("rolled_back")
                logger.warning(
                    "checkout_rolled_back",
                    customer_id=str(customer_id),
                    package_id=str(item.package_id),
                    error=booked.error.message,
                )
                return Result.failure(CheckoutFailedError(item.title, booked.error, []))

            record_checkout("partial_failure")
            logger.warning(
                "checkout_partial_failure",
                customer_id=str(customer_id),
                package_id=str(item.package_id),
                committed=len(receipt.booking_ids),
                error=booked.error.message,
            )
            return Result.failure(CheckoutFailedError(item.title, booked.error, receipt.booking_ids))

        receipt.booking_ids.append(booked.value.id)
        if not atomic:
            await db.commit()
            cart.remove(item.package_id)

    if atomic:
        await db.commit()
    cart.clear()

    record_checkout("success")
    logger.info(
        "checkout_completed",
        customer_id=str(customer_id),
        bookings=len(receipt.booking_ids),
        total=str(receipt.total),
    )
    return Result.success(receipt)
