"""
Customer service handling CRUD and the by-email lookup used at checkout.
"""

import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.core.logging import get_logger
from travel_agency.domain.errors import CustomerNotFoundError, DuplicateCustomerError, InUseError
from travel_agency.domain.results import Result
from travel_agency.models.booking import Booking
from travel_agency.models.customer import Customer
from travel_agency.schemas.customer import CustomerCreate, CustomerUpdate

logger = get_logger(__name__)

# Dialect inserts that support ON CONFLICT DO NOTHING
_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_customer(db: AsyncSession, customer_id: uuid.UUID) -> Optional[Customer]:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    return result.scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> Optional[Customer]:
    result = await db.execute(select(Customer).where(Customer.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def create_customer(db: AsyncSession, data: CustomerCreate) -> Result[Customer]:
    email = normalize_email(data.email)
    if await get_by_email(db, email):
        logger.warning("customer_create_failed", reason="email_exists", email=email)
        return Result.failure(DuplicateCustomerError(email))

    customer = Customer(
        id=uuid.uuid4(),
        first_name=data.first_name,
        last_name=data.last_name,
        email=email,
        phone=data.phone,
    )
    db.add(customer)
    await db.flush()
    await db.refresh(customer)

    logger.info("customer_created", customer_id=str(customer.id), email=email)
    return Result.success(customer)


async def get_or_create_by_email(db: AsyncSession, email: str) -> Customer:
    """
    Find the customer owning an e-mail, creating a minimal record when none
    exists. Checkout relies on this to attach bookings to a customer.
    """
    email = normalize_email(email)
    customer = await get_by_email(db, email)
    if customer:
        return customer

    # A concurrent checkout can create the same e-mail after the lookup above;
    # the conflicting insert is skipped and the winner's row is read back.
    insert = _INSERTS[db.get_bind().dialect.name]
    result = await db.execute(
        insert(Customer)
        .values(id=uuid.uuid4(), first_name=email, last_name="", email=email)
        .on_conflict_do_nothing(index_elements=[Customer.email])
    )
    customer = await get_by_email(db, email)

    if result.rowcount:
        logger.info("customer_created_at_checkout", customer_id=str(customer.id), email=email)
    else:
        logger.info("customer_found_after_conflict", customer_id=str(customer.id), email=email)
    return customer


async def list_customers(db: AsyncSession, term: Optional[str] = None) -> list[Customer]:
    """All customers, or those whose name or e-mail contains `term`."""
    query = select(Customer)
    if term and term.strip():
        pattern = f"%{term.strip().lower()}%"
        query = query.where(
            or_(
                func.lower(Customer.email).like(pattern),
                func.lower(Customer.first_name).like(pattern),
                func.lower(Customer.last_name).like(pattern),
            )
        )
    result = await db.execute(query.order_by(Customer.email.asc()))
    return list(result.scalars().all())


async def update_customer(db: AsyncSession, customer_id: uuid.UUID, data: CustomerUpdate) -> Result[Customer]:
    customer = await get_customer(db, customer_id)
    if customer is None:
        return Result.failure(CustomerNotFoundError(customer_id))

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(customer, field, value)
    await db.flush()

    logger.info("customer_updated", customer_id=str(customer.id))
    return Result.success(customer)


async def delete_customer(db: AsyncSession, customer_id: uuid.UUID) -> Result[None]:
    customer = await get_customer(db, customer_id)
    if customer is None:
        return Result.failure(CustomerNotFoundError(customer_id))

    bookings = await db.execute(select(func.count()).where(Booking.customer_id == customer_id))
    count = bookings.scalar_one()
    if count:
        return Result.failure(InUseError("Customer", "bookings", count))

    await db.delete(customer)
    await db.flush()
    logger.info("customer_deleted", customer_id=str(customer_id))
    return Result.success()
