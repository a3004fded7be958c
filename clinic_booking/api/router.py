from fastapi import APIRouter

from clinic_booking.domains.scheduling.api import router as scheduling_router

api_router = APIRouter()

# API routes (all have /api/v1 prefix from the app factory)
api_router.include_router(scheduling_router)
