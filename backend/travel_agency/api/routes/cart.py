"""
Session cart and checkout endpoints.

The cart lives in the signed session cookie. It is written back before any
checkout error is raised so items already booked leave the cart.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.api.deps import get_cart, save_cart
from travel_agency.core.config import get_settings
from travel_agency.db.session import get_db
from travel_agency.domain.cart import Cart
from travel_agency.schemas.cart import (
    CartItemAdd,
    CartItemResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
)
from travel_agency.services import cart_service
from travel_agency.services.cache_service import mark_packages_changed

router = APIRouter(prefix="/cart", tags=["Cart"])


def _cart_response(cart: Cart) -> CartResponse:
    subtotal, total = cart_service.cart_totals(cart)
    return CartResponse(
        items=[
            CartItemResponse(
                package_id=i.package_id,
                title=i.title,
                people_count=i.people_count,
                unit_price=i.unit_price,
                line_total=i.line_total,
            )
            for i in cart.items
        ],
        subtotal=subtotal,
        total=total,
    )


@router.get("/", response_model=CartResponse)
async def view_cart(cart: Cart = Depends(get_cart)):
    return _cart_response(cart)


@router.post("/items", response_model=CartResponse)
async def add_cart_item(
    item: CartItemAdd,
    request: Request,
    cart: Cart = Depends(get_cart),
    db: AsyncSession = Depends(get_db),
):
    """Stage a package. Capacity is not checked until checkout."""
    (await cart_service.add_to_cart(db, cart, item.package_id, item.people_count)).unwrap()
    save_cart(request, cart)
    return _cart_response(cart)


@router.delete("/items/{package_id}", response_model=CartResponse)
async def remove_cart_item(
    package_id: UUID,
    request: Request,
    cart: Cart = Depends(get_cart),
):
    cart_service.remove_from_cart(cart, package_id)
    save_cart(request, cart)
    return _cart_response(cart)


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout_cart(
    checkout_data: CheckoutRequest,
    request: Request,
    cart: Cart = Depends(get_cart),
    db: AsyncSession = Depends(get_db),
):
    """
    Book every staged item for the customer owning the e-mail address.
    See `cart_service.checkout` for partial-failure behaviour.
    """
    result = await cart_service.checkout(
        db, cart, checkout_data.email, atomic=get_settings().CHECKOUT_ATOMIC
    )
    save_cart(request, cart)
    mark_packages_changed(db)
    receipt = result.unwrap()

    return CheckoutResponse(
        message="Booking completed successfully.",
        customer_id=receipt.customer_id,
        booking_ids=receipt.booking_ids,
        total=receipt.total,
    )
