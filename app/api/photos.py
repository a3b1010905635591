"""Endpoints photos / Photo endpoints."""

import io
from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import StreamingResponse

from app.config import settings
from app.rate_limit import limiter
from app.schemas.photo import PhotoRead, PhotoUploadRequest, PhotoUploadResponse
from app.services.photo_service import PhotoUploadCoordinator
from app.api.deps import get_current_user_id, get_photo_coordinator, unwrap

router = APIRouter()


@router.post("/upload", response_model=PhotoUploadResponse, status_code=201)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def upload_photo(
    request: Request,
    file: UploadFile = File(...),
    latitude: float = Form(..., ge=-90, le=90),
    longitude: float = Form(..., ge=-180, le=180),
    timestamp: datetime = Form(...),
    user_id: str = Depends(get_current_user_id),
    coordinator: PhotoUploadCoordinator = Depends(get_photo_coordinator),
):
    """Upload photo terrain / Upload a field photo."""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Photo file is empty")
    if len(content) > settings.MAX_PHOTO_SIZE:
        raise HTTPException(status_code=400, detail="Photo too large (max 5 MB)")

    upload = PhotoUploadRequest(user_id=user_id, timestamp=timestamp, latitude=latitude, longitude=longitude)
    mime = file.content_type or "image/jpeg"
    return unwrap(await coordinator.upload(upload, io.BytesIO(content), mime, file_size=len(content)))


@router.get("/my", response_model=list[PhotoRead])
async def my_photos(
    user_id: str = Depends(get_current_user_id),
    coordinator: PhotoUploadCoordinator = Depends(get_photo_coordinator),
):
    """Photos de l'agent / Caller's photos."""
    return await coordinator.get_photos_by_user(user_id)


@router.get("/location", response_model=list[PhotoRead])
async def photos_by_location(
    latitude: float,
    longitude: float,
    radius: float = settings.DEFAULT_NEARBY_RADIUS_METERS,
    user_id: str = Depends(get_current_user_id),
    coordinator: PhotoUploadCoordinator = Depends(get_photo_coordinator),
):
    """Photos prises a proximite / Photos taken nearby."""
    return await coordinator.get_photos_by_location(latitude, longitude, radius)


@router.get("/daterange", response_model=list[PhotoRead])
async def photos_by_date_range(
    start_date: datetime,
    end_date: datetime,
    user_id: str = Depends(get_current_user_id),
    coordinator: PhotoUploadCoordinator = Depends(get_photo_coordinator),
):
    return await coordinator.get_photos_by_date_range(start_date, end_date)


@router.get("/{photo_id}", response_model=PhotoRead)
async def get_photo(
    photo_id: int,
    user_id: str = Depends(get_current_user_id),
    coordinator: PhotoUploadCoordinator = Depends(get_photo_coordinator),
):
    return await coordinator.get_photo(photo_id)


@router.get("/{photo_id}/file")
async def get_photo_file(
    photo_id: int,
    user_id: str = Depends(get_current_user_id),
    coordinator: PhotoUploadCoordinator = Depends(get_photo_coordinator),
):
    """Servir le fichier photo / Serve the photo file."""
    photo = await coordinator.get_photo(photo_id)
    result = await coordinator.get_photo_stream(photo_id)
    if not result.succeeded:
        raise HTTPException(status_code=404, detail=result.message)
    return StreamingResponse(result.data, media_type=photo.mime_type or "image/jpeg")


@router.delete("/{photo_id}", status_code=204)
async def delete_photo(
    photo_id: int,
    user_id: str = Depends(get_current_user_id),
    coordinator: PhotoUploadCoordinator = Depends(get_photo_coordinator),
):
    """Supprimer une photo / Delete a photo."""
    unwrap(await coordinator.delete_photo(photo_id))
