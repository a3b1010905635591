"""
Modèles SQLAlchemy / SQLAlchemy models.
Importer tous les modèles ici pour que Base.metadata les connaisse.
Import all models here so Base.metadata knows about them.
"""

from app.models.location_record import LocationRecord
from app.models.patrol_location import PatrolLocation
from app.models.checkpoint import Checkpoint
from app.models.checkpoint_verification import CheckpointVerification
from app.models.photo import Photo
from app.models.time_record import TimeRecord

__all__ = [
    "LocationRecord",
    "PatrolLocation",
    "Checkpoint",
    "CheckpointVerification",
    "Photo",
    "TimeRecord",
]
