"""Depots d'acces aux donnees / Data access repositories."""

from app.repositories.location_repository import LocationRepository
from app.repositories.patrol_repository import CheckpointRepository, PatrolLocationRepository
from app.repositories.verification_repository import CheckpointVerificationRepository
from app.repositories.photo_repository import PhotoRepository
from app.repositories.time_repository import TimeRecordRepository

__all__ = [
    "LocationRepository",
    "PatrolLocationRepository",
    "CheckpointRepository",
    "CheckpointVerificationRepository",
    "PhotoRepository",
    "TimeRecordRepository",
]
