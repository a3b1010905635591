"""Endpoints patrouille / Patrol endpoints: sites, checkpoints, verification."""

from datetime import datetime

from fastapi import APIRouter, Depends

from app.config import settings
from app.schemas.patrol import (
    CheckpointRead,
    CheckpointVerificationRead,
    CheckpointVerificationRequest,
    CheckpointVerificationResponse,
    PatrolLocationRead,
    PatrolStatusRead,
)
from app.services.patrol_service import CheckpointVerifier, PatrolService
from app.api.deps import get_checkpoint_verifier, get_current_user_id, get_patrol_service, unwrap

router = APIRouter()


@router.get("/locations", response_model=list[PatrolLocationRead])
async def list_locations(
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    """Liste des sites / Patrol locations."""
    return await service.get_locations()


# Declaree avant /locations/{location_id} / Declared before /locations/{location_id}
@router.get("/locations/nearby", response_model=list[PatrolLocationRead])
async def nearby_locations(
    latitude: float,
    longitude: float,
    radius: float = settings.DEFAULT_NEARBY_RADIUS_METERS,
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    """Sites a proximite / Nearby patrol locations."""
    return await service.get_nearby_locations(latitude, longitude, radius)


@router.get("/locations/{location_id}", response_model=PatrolLocationRead)
async def get_location(
    location_id: int,
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    """Detail d'un site / Patrol location detail."""
    return await service.get_location(location_id)


@router.get("/locations/{location_id}/checkpoints", response_model=list[CheckpointRead])
async def location_checkpoints(
    location_id: int,
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    """Points d'un site avec statut / Location checkpoints with verification state."""
    return await service.get_checkpoints(location_id, user_id)


@router.get("/locations/{location_id}/status", response_model=PatrolStatusRead)
async def patrol_status(
    location_id: int,
    user_id: str = Depends(get_current_user_id),
    verifier: CheckpointVerifier = Depends(get_checkpoint_verifier),
):
    """Avancement de la ronde / Patrol progress."""
    return await verifier.get_patrol_status(location_id, user_id)


@router.get("/checkpoints/nearby", response_model=list[CheckpointRead])
async def nearby_checkpoints(
    latitude: float,
    longitude: float,
    radius: float = settings.DEFAULT_NEARBY_RADIUS_METERS,
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    """Points a proximite / Nearby checkpoints."""
    return await service.get_nearby_checkpoints(latitude, longitude, radius, user_id)


@router.get("/checkpoints/{checkpoint_id}", response_model=CheckpointRead)
async def get_checkpoint(
    checkpoint_id: int,
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    return await service.get_checkpoint(checkpoint_id, user_id)


@router.get("/checkpoints/{checkpoint_id}/verified", response_model=bool)
async def checkpoint_verified(
    checkpoint_id: int,
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    return await service.is_checkpoint_verified(checkpoint_id, user_id)


@router.post("/verify", response_model=CheckpointVerificationResponse)
async def verify_checkpoint(
    data: CheckpointVerificationRequest,
    user_id: str = Depends(get_current_user_id),
    verifier: CheckpointVerifier = Depends(get_checkpoint_verifier),
):
    """Valider un point de controle / Verify a checkpoint (idempotent)."""
    return unwrap(await verifier.verify(data, user_id))


@router.get("/verifications", response_model=list[CheckpointVerificationRead])
async def my_verifications(
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    return await service.get_user_verifications(user_id)


@router.get("/verifications/daterange", response_model=list[CheckpointVerificationRead])
async def my_verifications_by_date(
    start_date: datetime,
    end_date: datetime,
    user_id: str = Depends(get_current_user_id),
    service: PatrolService = Depends(get_patrol_service),
):
    return await service.get_user_verifications_by_date_range(user_id, start_date, end_date)
