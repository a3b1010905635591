"""
Dépendances partagées / Shared dependencies.
Authentification, horloge, stockage et construction des services, injectés via Depends().
Authentication, clock, storage and service wiring, injected via Depends().
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.repositories.location_repository import LocationRepository
from app.repositories.patrol_repository import CheckpointRepository, PatrolLocationRepository
from app.repositories.photo_repository import PhotoRepository
from app.repositories.time_repository import TimeRecordRepository
from app.repositories.verification_repository import CheckpointVerificationRepository
from app.services.location_service import LocationBatchProcessor, LocationQueryService
from app.services.location_sync import UnsyncedLocationSyncer
from app.services.patrol_service import CheckpointVerifier, PatrolService
from app.services.photo_service import PhotoUploadCoordinator
from app.services.storage_service import StorageService
from app.services.time_service import TimeTrackingService
from app.utils.auth import decode_token
from app.utils.clock import Clock

security = HTTPBearer()

_clock = Clock()
_storage = StorageService(settings.STORAGE_BASE_PATH, _clock)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Extraire l'agent depuis le JWT / Extract the user id from the JWT subject."""
    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access" or not payload.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    return str(payload["sub"])


def get_clock() -> Clock:
    return _clock


def get_storage() -> StorageService:
    return _storage


def get_batch_processor(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> LocationBatchProcessor:
    return LocationBatchProcessor(LocationRepository(db), clock)


def get_location_queries(db: AsyncSession = Depends(get_db)) -> LocationQueryService:
    return LocationQueryService(LocationRepository(db))


def get_location_syncer(db: AsyncSession = Depends(get_db)) -> UnsyncedLocationSyncer:
    return UnsyncedLocationSyncer(LocationRepository(db))


def get_checkpoint_verifier(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> CheckpointVerifier:
    return CheckpointVerifier(
        CheckpointRepository(db),
        PatrolLocationRepository(db),
        CheckpointVerificationRepository(db),
        clock,
    )


def get_patrol_service(db: AsyncSession = Depends(get_db)) -> PatrolService:
    return PatrolService(
        PatrolLocationRepository(db),
        CheckpointRepository(db),
        CheckpointVerificationRepository(db),
    )


def get_photo_coordinator(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
) -> PhotoUploadCoordinator:
    return PhotoUploadCoordinator(PhotoRepository(db), storage, settings.PHOTO_FOLDER)


def get_time_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> TimeTrackingService:
    return TimeTrackingService(TimeRecordRepository(db), clock)


def unwrap(result):
    """Donnee du Result ou HTTP 400 / Result data or HTTP 400 with its message."""
    if not result.succeeded:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return result.data
