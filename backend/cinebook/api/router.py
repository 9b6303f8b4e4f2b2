"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from cinebook.api.routes import auth, bookings

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(bookings.router)
