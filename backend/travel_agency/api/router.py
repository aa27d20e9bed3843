"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from travel_agency.api.routes import bookings, cart, customers, destinations, packages

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(destinations.router)
api_router.include_router(packages.router)
api_router.include_router(customers.router)
api_router.include_router(bookings.router)
api_router.include_router(cart.router)
