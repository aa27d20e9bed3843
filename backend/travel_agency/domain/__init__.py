"""Domain primitives for the booking core: errors, results, pricing, cart."""

from travel_agency.domain.cart import Cart, CartItem
from travel_agency.domain.errors import DomainError, ErrorCode
from travel_agency.domain.results import Result

__all__ = ["Cart", "CartItem", "DomainError", "ErrorCode", "Result"]
