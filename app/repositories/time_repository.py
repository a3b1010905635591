"""Depot des pointages / Time record repository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.time_record import CLOCK_OUT, TimeRecord


class TimeRecordRepository:
    """Acces aux pointages / Time records access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, record: TimeRecord) -> int:
        self.session.add(record)
        await self.session.flush()
        return record.id

    async def get_by_id(self, record_id: int) -> TimeRecord | None:
        return await self.session.get(TimeRecord, record_id)

    async def get_latest(self, user_id: str) -> TimeRecord | None:
        result = await self.session.execute(
            select(TimeRecord)
            .where(TimeRecord.user_id == user_id)
            .order_by(TimeRecord.timestamp.desc(), TimeRecord.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_current_status(self, user_id: str) -> str:
        """Type du dernier pointage, "out" sans historique / Latest record type, "out" when none."""
        latest = await self.get_latest(user_id)
        return latest.type if latest else CLOCK_OUT

    async def get_by_user(self, user_id: str, limit: int) -> list[TimeRecord]:
        result = await self.session.execute(
            select(TimeRecord)
            .where(TimeRecord.user_id == user_id)
            .order_by(TimeRecord.timestamp.desc(), TimeRecord.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_user_and_date_range(self, user_id: str, start_iso: str, end_iso: str) -> list[TimeRecord]:
        result = await self.session.execute(
            select(TimeRecord)
            .where(
                TimeRecord.user_id == user_id,
                TimeRecord.timestamp >= start_iso,
                TimeRecord.timestamp <= end_iso,
            )
            .order_by(TimeRecord.timestamp, TimeRecord.id)
        )
        return list(result.scalars().all())

    async def delete(self, record: TimeRecord) -> None:
        await self.session.delete(record)
        await self.session.flush()

    async def delete_older_than(self, cutoff_iso: str, only_synced: bool = True) -> int:
        stmt = delete(TimeRecord).where(TimeRecord.timestamp < cutoff_iso)
        if only_synced:
            stmt = stmt.where(TimeRecord.is_synced.is_(True))
        result = await self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount or 0
