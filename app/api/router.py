from fastapi import APIRouter

from app.api.v1 import profiles, specialties, subscriptions

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(profiles.router)
api_router.include_router(specialties.router)
api_router.include_router(subscriptions.router)
