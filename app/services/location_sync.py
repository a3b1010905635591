"""
Synchronisation differee des positions / Deferred location sync.

Tache de fond : marque les positions non synchronisees par paquets. Un id rejete
ne bloque jamais le reste du paquet.
Background reconciliation: flags unsynced records batch by batch. A rejected id
never stalls the rest of the batch.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.repositories.location_repository import LocationRepository
from app.services.errors import ValidationError
from app.services.sync_result import SyncResult

logger = logging.getLogger(__name__)


class UnsyncedLocationSyncer:
    """Rattrapage des positions non synchronisees / Unsynced location reconciliation."""

    def __init__(self, repository: LocationRepository):
        self.repository = repository

    async def sync_pending(self, batch_size: int = 50) -> SyncResult:
        """Synchroniser un paquet / Sync one batch.

        Un appel groupe d'abord ; en cas d'echec, confirmation id par id pour
        isoler les rejets. Aucune exception de persistance ne sort d'ici.
        One bulk call first; on failure or partial match, per-id confirmation
        isolates the rejects. Each attempt commits or rolls back on its own, so
        a reported id always matches the stored flag. No persistence exception escapes.
        """
        if batch_size <= 0:
            raise ValidationError("Batch size must be greater than zero")

        result = SyncResult()
        try:
            records = await self.repository.get_unsynced(batch_size)
        except Exception as exc:
            logger.warning("Could not fetch unsynced locations: %s", exc)
            return result

        if not records:
            return result

        ids = [r.id for r in records]
        try:
            if await self.repository.update_sync_status(ids, True):
                for record_id in ids:
                    result.add_synced(record_id)
                logger.info("Synced %d locations", result.success_count)
                return result
            logger.warning("Bulk sync did not confirm all %d ids, confirming one by one", len(ids))
        except Exception as exc:
            logger.warning("Bulk sync failed for %d ids, confirming one by one: %s", len(ids), exc)

        for record_id in ids:
            try:
                confirmed = await self.repository.update_sync_status([record_id], True)
            except Exception as exc:
                logger.warning("Location %s could not be synced: %s", record_id, exc)
                result.add_failed(record_id)
                continue
            if confirmed:
                result.add_synced(record_id)
            else:
                logger.warning("Location %s could not be synced: no row updated", record_id)
                result.add_failed(record_id)

        logger.info("Synced %d locations, %d failed", result.success_count, result.failure_count)
        return result


async def run_sync_loop(
    session_factory: async_sessionmaker[AsyncSession],
    batch_size: int,
    interval_seconds: float,
) -> None:
    """Boucle de fond lancee par le lifespan / Background loop started by the app lifespan.

    Une iteration en echec est journalisee puis retentee ; seule l'annulation arrete la boucle.
    A failing iteration is logged and retried; only cancellation stops the loop.
    """
    logger.info("Location sync loop started (batch=%d, every %ss)", batch_size, interval_seconds)
    while True:
        try:
            async with session_factory() as session:
                result = await UnsyncedLocationSyncer(LocationRepository(session)).sync_pending(batch_size)
                await session.commit()
        except Exception:
            logger.exception("Location sync cycle failed, retrying in %ss", interval_seconds)
            await asyncio.sleep(interval_seconds)
            continue
        # Paquet plein : il en reste probablement / Full batch: more are likely pending
        if result.success_count + result.failure_count < batch_size or result.has_failures:
            await asyncio.sleep(interval_seconds)
