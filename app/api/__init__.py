"""Routes API / API routes."""

from fastapi import APIRouter

from app.api import (
    location,
    patrol,
    photos,
    time_tracking,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(location.router, prefix="/location", tags=["location"])
api_router.include_router(patrol.router, prefix="/patrol", tags=["patrol"])
api_router.include_router(photos.router, prefix="/photos", tags=["photos"])
api_router.include_router(time_tracking.router, prefix="/time", tags=["time"])
