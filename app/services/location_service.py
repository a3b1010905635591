"""
Service positions agents / Guard location service.
Ingestion des batchs GPS du mobile et lectures d'historique.
Ingests GPS batches from the mobile app and serves history reads.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from app.models.location_record import LocationRecord
from app.repositories.location_repository import LocationRepository
from app.schemas.location import LocationBatchRequest
from app.services.errors import DependencyFailure, ValidationError
from app.services.sync_result import SyncResult
from app.utils.clock import Clock, to_utc_iso
from app.utils.geo import validate_coordinates

logger = logging.getLogger(__name__)


class LocationBatchProcessor:
    """Ingestion d'un batch de positions / Location batch ingestion.

    Le batch est valide en entier avant toute ecriture, puis insere en une fois.
    The whole batch is validated before any write, then inserted in one bulk call;
    a failing bulk write propagates as DependencyFailure (no partial SyncResult at this stage).
    """

    def __init__(self, repository: LocationRepository, clock: Clock):
        self.repository = repository
        self.clock = clock

    @staticmethod
    def _validate(request: LocationBatchRequest | None) -> None:
        if request is None or request.locations is None:
            raise ValidationError("Location batch must contain a locations collection")
        if not request.user_id:
            raise ValidationError("User ID is required")
        if len(request.locations) == 0:
            raise ValidationError("Location batch must contain at least one location")
        for index, sample in enumerate(request.locations):
            error = validate_coordinates(sample.latitude, sample.longitude)
            if error:
                raise ValidationError(f"locations[{index}]: {error}")
            if sample.accuracy is not None and sample.accuracy < 0:
                raise ValidationError(f"locations[{index}]: Accuracy must be greater than or equal to 0")

    async def process_batch(self, request: LocationBatchRequest | None) -> SyncResult:
        """Enregistrer le batch / Persist the batch. Ids come back in input order."""
        self._validate(request)

        now_iso = self.clock.now_iso()
        records = [
            LocationRecord(
                user_id=request.user_id,
                latitude=sample.latitude,
                longitude=sample.longitude,
                accuracy=sample.accuracy or 0.0,
                timestamp=to_utc_iso(sample.timestamp) if sample.timestamp else now_iso,
                # L'ingestion ne vaut pas synchro / Ingestion is not downstream sync
                is_synced=False,
                created_at=now_iso,
            )
            for sample in request.locations
        ]
        try:
            ids = await self.repository.add_range(records)
        except SQLAlchemyError as exc:
            logger.error("Location batch of %d failed for user %s: %s", len(records), request.user_id, exc)
            raise DependencyFailure("Failed to store location batch") from exc

        result = SyncResult()
        for record_id in ids:
            result.add_synced(record_id)
        logger.info("Stored %d locations for user %s", result.success_count, request.user_id)
        return result


class LocationQueryService:
    """Lectures d'historique et purge / History reads and retention purge."""

    def __init__(self, repository: LocationRepository):
        self.repository = repository

    async def get_history(self, user_id: str, start_time: datetime, end_time: datetime) -> list[LocationRecord]:
        if not user_id:
            raise ValidationError("User ID cannot be null or empty")
        if start_time > end_time:
            raise ValidationError("Start time must be earlier than end time")
        return await self.repository.get_by_user_and_time_range(
            user_id, to_utc_iso(start_time), to_utc_iso(end_time)
        )

    async def get_latest(self, user_id: str) -> LocationRecord | None:
        if not user_id:
            raise ValidationError("User ID cannot be null or empty")
        return await self.repository.get_latest(user_id)

    async def get_recent(self, user_id: str, limit: int) -> list[LocationRecord]:
        if not user_id:
            raise ValidationError("User ID cannot be null or empty")
        if limit <= 0:
            raise ValidationError("Limit must be greater than zero")
        return await self.repository.get_by_user(user_id, limit)

    async def cleanup(self, older_than: datetime, only_synced: bool = True) -> int:
        """Supprimer les positions anciennes / Delete old records. Returns the count removed."""
        removed = await self.repository.delete_older_than(to_utc_iso(older_than), only_synced)
        logger.info("Removed %d location records older than %s", removed, older_than)
        return removed
