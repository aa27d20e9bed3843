"""
Tests for price arithmetic.
"""

from decimal import Decimal

import pytest

from travel_agency.domain import pricing


def test_line_total_multiplies_exactly():
    assert pricing.line_total(Decimal("199.99"), 3) == Decimal("599.97")


def test_line_total_zero_quantity():
    assert pricing.line_total(Decimal("50.00"), 0) == Decimal("0")


def test_line_total_rejects_negative_quantity():
    with pytest.raises(ValueError):
        pricing.line_total(Decimal("10.00"), -1)


@pytest.mark.parametrize("quantity", [1.5, "2", True])
def test_line_total_rejects_non_integer_quantity(quantity):
    with pytest.raises(TypeError):
        pricing.line_total(Decimal("10.00"), quantity)


def test_float_prices_are_rejected():
    with pytest.raises(TypeError):
        pricing.line_total(0.1, 3)


def test_subtotal_and_grand_total_match():
    lines = [(Decimal("0.10"), 3), (Decimal("1200.00"), 2)]
    assert pricing.subtotal(lines) == Decimal("2400.30")
    assert pricing.grand_total(lines) == Decimal("2400.30")


def test_subtotal_of_nothing_is_zero():
    assert pricing.subtotal([]) == Decimal("0")


def test_round_money_half_up():
    assert pricing.round_money(Decimal("10.005")) == Decimal("10.01")
    assert pricing.round_money(Decimal("10.004")) == Decimal("10.00")
    assert pricing.round_money(Decimal("-2.675")) == Decimal("-2.68")
