"""Domain error codes for the booking core.

Errors are returned inside a `Result` for expected business outcomes and
only raised at the HTTP boundary, where a registered handler renders them.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_QUANTITY = "INVALID_QUANTITY"
    PACKAGE_NOT_FOUND = "PACKAGE_NOT_FOUND"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"
    EMPTY_CART = "EMPTY_CART"
    CONVERSION_UNAVAILABLE = "CONVERSION_UNAVAILABLE"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    DESTINATION_NOT_FOUND = "DESTINATION_NOT_FOUND"
    DUPLICATE_CUSTOMER = "DUPLICATE_CUSTOMER"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    CAPACITY_CONFLICT = "CAPACITY_CONFLICT"
    CHECKOUT_FAILED = "CHECKOUT_FAILED"
    IN_USE = "IN_USE"


class DomainError(Exception):
    """Base domain error with code, user-safe message and HTTP status."""

    status_code = 400

    def __init__(self, code: ErrorCode, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def extra(self) -> dict[str, Any]:
        """Additional fields rendered next to the message."""
        return {}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidQuantityError(DomainError):
    status_code = 422

    def __init__(self, quantity: int) -> None:
        super().__init__(ErrorCode.INVALID_QUANTITY, "People count must be greater than 0.")
        self.quantity = quantity


class PackageNotFoundError(DomainError):
    status_code = 404

    def __init__(self, package_id: Any) -> None:
        super().__init__(ErrorCode.PACKAGE_NOT_FOUND, "Package not found.")
        self.package_id = package_id


class InsufficientCapacityError(DomainError):
    status_code = 409

    def __init__(self, remaining: int, title: Optional[str] = None) -> None:
        if title:
            message = f'Not enough seats for "{title}". Remaining: {remaining}.'
        else:
            message = f"Not enough seats. Remaining: {remaining}."
        super().__init__(ErrorCode.INSUFFICIENT_CAPACITY, message)
        self.remaining = remaining
        self.title = title

    def extra(self) -> dict[str, Any]:
        return {"remaining": self.remaining}


class EmptyCartError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.EMPTY_CART, "Cart is empty.")


class ConversionUnavailableError(DomainError):
    status_code = 503

    def __init__(self, from_currency: str, to_currency: str) -> None:
        super().__init__(
            ErrorCode.CONVERSION_UNAVAILABLE,
            f"Conversion from {from_currency} to {to_currency} is currently unavailable.",
        )


class BookingNotFoundError(DomainError):
    status_code = 404

    def __init__(self, booking_id: Any) -> None:
        super().__init__(ErrorCode.BOOKING_NOT_FOUND, "Booking not found.")
        self.booking_id = booking_id


class CustomerNotFoundError(DomainError):
    status_code = 404

    def __init__(self, customer_id: Any) -> None:
        super().__init__(ErrorCode.CUSTOMER_NOT_FOUND, "Customer not found.")
        self.customer_id = customer_id


class DestinationNotFoundError(DomainError):
    status_code = 404

    def __init__(self, destination_id: Any) -> None:
        super().__init__(ErrorCode.DESTINATION_NOT_FOUND, "Destination not found.")
        self.destination_id = destination_id


class DuplicateCustomerError(DomainError):
    status_code = 409

    def __init__(self, email: str) -> None:
        super().__init__(ErrorCode.DUPLICATE_CUSTOMER, f"A customer with e-mail {email} already exists.")


class InvalidStatusTransitionError(DomainError):
    status_code = 409

    def __init__(self, from_status: str, to_status: str) -> None:
        super().__init__(
            ErrorCode.INVALID_STATUS_TRANSITION,
            f"Booking cannot move from {from_status} to {to_status}.",
        )
        self.from_status = from_status
        self.to_status = to_status


class InvalidDateRangeError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.INVALID_DATE_RANGE, "End date must be on or after start date.")


class CapacityConflictError(DomainError):
    status_code = 409

    def __init__(self, booked: int, requested: int) -> None:
        super().__init__(
            ErrorCode.CAPACITY_CONFLICT,
            f"Capacity {requested} is below the {booked} seats already booked.",
        )
        self.booked = booked
        self.requested = requested


class CheckoutFailedError(DomainError):
    """A commit-pass failure. Bookings made before it are kept."""

    def __init__(self, title: str, cause: DomainError, committed_booking_ids: list) -> None:
        message = f'Failed to book "{title}": {cause.message}'
        if committed_booking_ids:
            message += " Some items may already be booked."
        super().__init__(ErrorCode.CHECKOUT_FAILED, message, status_code=cause.status_code)
        self.cause = cause
        self.committed_booking_ids = list(committed_booking_ids)

    def extra(self) -> dict[str, Any]:
        return {
            "cause": self.cause.code.value,
            "committed_booking_ids": [str(i) for i in self.committed_booking_ids],
        }


class InUseError(DomainError):
    """Deleting a record that other records still reference."""

    status_code = 409

    def __init__(self, resource: str, dependants: str, count: int) -> None:
        super().__init__(ErrorCode.IN_USE, f"{resource} still has {count} {dependants}.")
        self.count = count
