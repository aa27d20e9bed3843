"""
Pydantic schemas for the session cart and checkout.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr


class CartItemAdd(BaseModel):
    package_id: UUID
    people_count: int = 1


class CartItemResponse(BaseModel):
    package_id: UUID
    title: str
    people_count: int
    unit_price: Decimal
    line_total: Decimal

    model_config = {"from_attributes": True}


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    subtotal: Decimal
    total: Decimal


class CheckoutRequest(BaseModel):
    email: EmailStr


class CheckoutResponse(BaseModel):
    message: str
    customer_id: UUID
    booking_ids: list[UUID]
    total: Decimal
