"""Depot des positions agents / Guard location repository."""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.location_record import LocationRecord

# Taille des paquets d'UPDATE ... IN (...) / Chunk size for UPDATE ... IN (...)
UPDATE_CHUNK_SIZE = 100


class LocationRepository:
    """Acces aux positions / Location records access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, record_id: int) -> LocationRecord | None:
        return await self.session.get(LocationRecord, record_id)

    async def add_range(self, records: list[LocationRecord]) -> list[int]:
        """Insertion groupee, ids dans l'ordre d'entree / Bulk insert, ids in input order."""
        self.session.add_all(records)
        await self.session.flush()
        return [r.id for r in records]

    async def get_unsynced(self, limit: int) -> list[LocationRecord]:
        """Positions non synchronisees, plus anciennes d'abord / Unsynced records, oldest first."""
        result = await self.session.execute(
            select(LocationRecord)
            .where(LocationRecord.is_synced.is_(False))
            .order_by(LocationRecord.timestamp, LocationRecord.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update_sync_status(self, ids: list[int], synced: bool) -> bool:
        """Marquer les ids / Flag the ids.

        Chaque appel est sa propre transaction : valide si toutes les lignes
        correspondent, annule sinon ou en cas d'erreur.
        Each call is its own transaction: committed when every id matched a row,
        rolled back on a partial match or an error (which is re-raised).
        Returns True only when every id was updated.
        """
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return False
        updated = 0
        try:
            for i in range(0, len(unique_ids), UPDATE_CHUNK_SIZE):
                chunk = unique_ids[i:i + UPDATE_CHUNK_SIZE]
                result = await self.session.execute(
                    update(LocationRecord)
                    .where(LocationRecord.id.in_(chunk))
                    .values(is_synced=synced)
                    .execution_options(synchronize_session=False)
                )
                updated += result.rowcount or 0
        except Exception:
            await self.session.rollback()
            raise
        if updated != len(unique_ids):
            await self.session.rollback()
            return False
        await self.session.commit()
        return True

    async def get_by_user(self, user_id: str, limit: int) -> list[LocationRecord]:
        """Dernieres positions d'un agent / Latest records of a user, newest first."""
        result = await self.session.execute(
            select(LocationRecord)
            .where(LocationRecord.user_id == user_id)
            .order_by(LocationRecord.timestamp.desc(), LocationRecord.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_user_and_time_range(self, user_id: str, start_iso: str, end_iso: str) -> list[LocationRecord]:
        result = await self.session.execute(
            select(LocationRecord)
            .where(
                LocationRecord.user_id == user_id,
                LocationRecord.timestamp >= start_iso,
                LocationRecord.timestamp <= end_iso,
            )
            .order_by(LocationRecord.timestamp, LocationRecord.id)
        )
        return list(result.scalars().all())

    async def get_latest(self, user_id: str) -> LocationRecord | None:
        records = await self.get_by_user(user_id, 1)
        return records[0] if records else None

    async def delete_older_than(self, cutoff_iso: str, only_synced: bool = True) -> int:
        """Purge retention / Retention purge. Returns the number of deleted rows."""
        stmt = delete(LocationRecord).where(LocationRecord.timestamp < cutoff_iso)
        if only_synced:
            stmt = stmt.where(LocationRecord.is_synced.is_(True))
        result = await self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount or 0
