"""Price arithmetic on `Decimal` amounts.

Totals are exact; rounding happens only for display and currency
conversion.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple

CENT = Decimal("0.01")


def _check_amount(amount: Decimal) -> None:
    if not isinstance(amount, Decimal):
        raise TypeError(f"Monetary amounts must be Decimal, got {type(amount).__name__}")


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    _check_amount(unit_price)
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise TypeError("Quantity must be an integer")
    if quantity < 0:
        raise ValueError("Quantity cannot be negative")
    return unit_price * quantity


def subtotal(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Sum of line totals for (unit_price, quantity) pairs."""
    return sum((line_total(price, qty) for price, qty in lines), Decimal("0"))


def grand_total(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    # No fees or discounts apply on top of the subtotal.
    return subtotal(lines)


def round_money(amount: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""
    _check_amount(amount)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
