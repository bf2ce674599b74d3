"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from activitybook.api.routes import activities, settlements

api_router = APIRouter()

# Include all route modules
api_router.include_router(activities.router)
api_router.include_router(settlements.router)
