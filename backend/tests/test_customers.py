"""
Tests for customer endpoints.
"""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_customer(client: AsyncClient):
    response = await client.post(
        "/api/v1/customers/",
        json={"first_name": "Joao", "last_name": "Costa", "email": "Joao@Example.com"},
    )
    assert response.status_code == 201
    assert response.json()["email"] == "joao@example.com"


@pytest.mark.asyncio
async def test_create_duplicate_email(client: AsyncClient, test_customer):
    response = await client.post(
        "/api/v1/customers/",
        json={"first_name": "Other", "email": "ana@example.com"},
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_CUSTOMER"


@pytest.mark.asyncio
async def test_create_customer_invalid_email(client: AsyncClient):
    response = await client.post("/api/v1/customers/", json={"first_name": "X", "email": "nope"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_search_customers(client: AsyncClient, test_customer):
    await client.post("/api/v1/customers/", json={"first_name": "Bruno", "email": "bruno@example.com"})

    response = await client.get("/api/v1/customers/", params={"q": "silva"})
    assert [c["email"] for c in response.json()] == ["ana@example.com"]

    everyone = await client.get("/api/v1/customers/")
    assert len(everyone.json()) == 2


@pytest.mark.asyncio
async def test_update_customer(client: AsyncClient, test_customer):
    response = await client.put(f"/api/v1/customers/{test_customer.id}", json={"phone": "+351 900 000 000"})
    assert response.status_code == 200
    assert response.json()["phone"] == "+351 900 000 000"


@pytest.mark.asyncio
async def test_get_unknown_customer(client: AsyncClient):
    response = await client.get(f"/api/v1/customers/{uuid.uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_customer_with_bookings_is_refused(client: AsyncClient, test_customer, test_package):
    await client.post(
        "/api/v1/bookings/",
        json={"customer_id": str(test_customer.id), "package_id": str(test_package.id), "people_count": 1},
    )

    response = await client.delete(f"/api/v1/customers/{test_customer.id}")
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_customer(client: AsyncClient, test_customer):
    response = await client.delete(f"/api/v1/customers/{test_customer.id}")
    assert response.status_code == 204
