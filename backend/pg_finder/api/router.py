"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from pg_finder.api.routes import auth, listings, rooms, bookings

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(listings.router)
api_router.include_router(rooms.router)
api_router.include_router(bookings.router)
