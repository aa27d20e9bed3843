"""
Tests for the session cart value object.
"""

import uuid
from decimal import Decimal

import pytest

from travel_agency.domain.cart import Cart, CartItem


def test_stage_new_item():
    cart = Cart()
    package_id = uuid.uuid4()

    item = cart.stage(package_id, "Rome", Decimal("300.00"), 2)

    assert not cart.is_empty
    assert item.people_count == 2
    assert cart.total == Decimal("600.00")


def test_stage_same_package_increments_quantity():
    cart = Cart()
    package_id = uuid.uuid4()

    cart.stage(package_id, "Rome", Decimal("300.00"), 2)
    cart.stage(package_id, "Rome (renamed)", Decimal("999.00"), 3)

    assert len(cart.items) == 1
    assert cart.items[0].people_count == 5
    # Snapshot from the first staging is kept
    assert cart.items[0].title == "Rome"
    assert cart.items[0].unit_price == Decimal("300.00")


@pytest.mark.parametrize("count", [0, -4])
def test_stage_clamps_count_to_one(count):
    cart = Cart()
    item = cart.stage(uuid.uuid4(), "Oslo", Decimal("10.00"), count)
    assert item.people_count == 1


def test_remove_is_idempotent():
    cart = Cart()
    package_id = uuid.uuid4()
    cart.stage(package_id, "Oslo", Decimal("10.00"), 1)

    cart.remove(package_id)
    cart.remove(package_id)
    cart.remove(uuid.uuid4())

    assert cart.is_empty


def test_items_keep_staging_order():
    cart = Cart()
    ids = [uuid.uuid4() for _ in range(3)]
    for n, package_id in enumerate(ids):
        cart.stage(package_id, f"P{n}", Decimal("1.00"), 1)

    assert [i.package_id for i in cart.items] == ids


def test_total_of_empty_cart_is_zero():
    assert Cart().total == Decimal("0")


def test_cart_item_requires_at_least_one_person():
    with pytest.raises(ValueError):
        CartItem(package_id=uuid.uuid4(), title="X", people_count=0, unit_price=Decimal("1.00"))


def test_session_payload_restores_cart():
    cart = Cart()
    first, second = uuid.uuid4(), uuid.uuid4()
    cart.stage(first, "Rome", Decimal("300.10"), 2)
    cart.stage(second, "Paris", Decimal("0.10"), 3)

    restored = Cart.from_session(cart.to_session())

    assert restored == cart
    assert restored.total == Decimal("600.50")


def test_missing_session_payload_is_an_empty_cart():
    assert Cart.from_session(None).is_empty
