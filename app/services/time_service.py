"""
Service pointage / Time tracking service.
Prise et fin de service des agents : alternance stricte in / out.
Guard clock in / clock out with strict in / out alternation.
"""

import logging
from datetime import datetime

from app.models.time_record import CLOCK_IN, CLOCK_OUT, TimeRecord
from app.repositories.time_repository import TimeRecordRepository
from app.schemas.time import ClockStatusRead, TimeRecordCreate, TimeRecordResponse
from app.services.errors import ForbiddenError, NotFoundError, ValidationError
from app.services.result import Result
from app.utils.clock import Clock, to_utc_iso

logger = logging.getLogger(__name__)


class TimeTrackingService:
    """Pointages d'un agent / A guard's clock events."""

    def __init__(self, repository: TimeRecordRepository, clock: Clock):
        self.repository = repository
        self.clock = clock

    async def record(self, request: TimeRecordCreate | None, user_id: str) -> Result[TimeRecordResponse]:
        """Enregistrer un pointage / Record a clock event.

        Deux "in" (ou deux "out") de suite sont refuses ; sans historique l'agent est "out".
        Two "in" (or two "out") in a row are refused; with no history the user is "out".
        """
        if request is None:
            raise ValidationError("Time record request cannot be null")
        if not user_id:
            raise ValidationError("User ID cannot be null or empty")
        event_type = request.type.lower()
        if event_type not in (CLOCK_IN, CLOCK_OUT):
            raise ValidationError("Time record type must be 'in' or 'out'")

        current = await self.repository.get_current_status(user_id)
        if event_type == current:
            return Result.fail(f"User is already clocked {current}")

        record = TimeRecord(
            user_id=user_id,
            type=event_type,
            timestamp=to_utc_iso(request.timestamp) if request.timestamp else self.clock.now_iso(),
            latitude=request.latitude,
            longitude=request.longitude,
            is_synced=False,
        )
        record_id = await self.repository.add(record)
        logger.info("Clock %s recorded for user %s (id %s)", event_type, user_id, record_id)
        return Result.ok(TimeRecordResponse(id=record_id, status="success"))

    async def clock_in(self, user_id: str, latitude: float = 0.0, longitude: float = 0.0) -> Result[TimeRecordResponse]:
        return await self.record(TimeRecordCreate(type=CLOCK_IN, latitude=latitude, longitude=longitude), user_id)

    async def clock_out(self, user_id: str, latitude: float = 0.0, longitude: float = 0.0) -> Result[TimeRecordResponse]:
        return await self.record(TimeRecordCreate(type=CLOCK_OUT, latitude=latitude, longitude=longitude), user_id)

    async def get_status(self, user_id: str) -> ClockStatusRead:
        if not user_id:
            raise ValidationError("User ID cannot be null or empty")
        latest = await self.repository.get_latest(user_id)
        if latest is None:
            return ClockStatusRead(status=CLOCK_OUT)
        return ClockStatusRead(status=latest.type, last_timestamp=latest.timestamp)

    async def get_history(self, user_id: str, limit: int = 50) -> list[TimeRecord]:
        if not user_id:
            raise ValidationError("User ID cannot be null or empty")
        if limit <= 0:
            raise ValidationError("Limit must be greater than zero")
        return await self.repository.get_by_user(user_id, limit)

    async def get_by_date_range(self, user_id: str, start_date: datetime, end_date: datetime) -> list[TimeRecord]:
        if not user_id:
            raise ValidationError("User ID cannot be null or empty")
        if start_date > end_date:
            raise ValidationError("Start date must be before or equal to end date")
        return await self.repository.get_by_user_and_date_range(
            user_id, to_utc_iso(start_date), to_utc_iso(end_date)
        )

    async def delete_record(self, record_id: int, user_id: str) -> None:
        if record_id <= 0:
            raise ValidationError("Invalid time record ID")
        record = await self.repository.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"Time record with ID {record_id} not found")
        if record.user_id != user_id:
            logger.warning("User %s tried to delete time record %s of another user", user_id, record_id)
            raise ForbiddenError("You are not authorized to delete this time record")
        await self.repository.delete(record)

    async def cleanup(self, older_than: datetime, only_synced: bool = True) -> int:
        removed = await self.repository.delete_older_than(to_utc_iso(older_than), only_synced)
        logger.info("Removed %d time records older than %s", removed, older_than)
        return removed
