"""
Customer endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from travel_agency.db.session import get_db
from travel_agency.domain.errors import CustomerNotFoundError
from travel_agency.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from travel_agency.services import customer_service

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer_endpoint(customer_data: CustomerCreate, db: AsyncSession = Depends(get_db)):
    return (await customer_service.create_customer(db, customer_data)).unwrap()


@router.get("/", response_model=list[CustomerResponse])
async def list_customers_endpoint(
    q: Optional[str] = Query(None, description="Matches name or e-mail"),
    db: AsyncSession = Depends(get_db),
):
    return await customer_service.list_customers(db, q)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer_endpoint(customer_id: UUID, db: AsyncSession = Depends(get_db)):
    customer = await customer_service.get_customer(db, customer_id)
    if customer is None:
        raise CustomerNotFoundError(customer_id)
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer_endpoint(
    customer_id: UUID,
    customer_data: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
):
    return (await customer_service.update_customer(db, customer_id, customer_data)).unwrap()


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer_endpoint(customer_id: UUID, db: AsyncSession = Depends(get_db)):
    (await customer_service.delete_customer(db, customer_id)).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
