"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from cricket_tickets.api.routes import auth, stadiums, matches, bookings

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(stadiums.router)
api_router.include_router(matches.router)
api_router.include_router(bookings.router)
