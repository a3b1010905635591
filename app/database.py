"""
Connexion a la base de donnees / Database connection.
Supporte SQLite (dev) et PostgreSQL (prod) via SQLAlchemy 2.0 async.
"""

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

logger = logging.getLogger(__name__)

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Configuration moteur / Engine configuration
_engine_kwargs: dict = {
    "echo": False,
}

# PostgreSQL : connection pooling pour les rafales de synchro mobile /
# PostgreSQL: connection pooling for mobile sync bursts
if not _is_sqlite:
    _engine_kwargs.update({
        "pool_size": 20,
        "max_overflow": 30,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    })

engine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    """Dependance FastAPI pour obtenir une session DB / FastAPI dependency for DB session."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Creer les tables au demarrage / Create tables on startup."""
    # Enregistrer les modeles sur Base.metadata / Register models on Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    # Purger les positions synchronisees anciennes / Purge old synced positions
    await _cleanup_old_records(settings.LOCATION_RETENTION_DAYS)


async def _cleanup_old_records(days: int):
    """Purger positions et pointages synchronises > N jours / Purge synced locations and time records older than N days."""
    from app.repositories.location_repository import LocationRepository
    from app.repositories.time_repository import TimeRecordRepository
    from app.utils.clock import Clock, to_utc_iso

    cutoff = to_utc_iso(Clock().utc_now() - timedelta(days=days))
    async with async_session() as session:
        removed = await LocationRepository(session).delete_older_than(cutoff, only_synced=True)
        removed_time = await TimeRecordRepository(session).delete_older_than(cutoff, only_synced=True)
        await session.commit()
    if removed or removed_time:
        logger.info("[cleanup] %d location / %d time records removed (before %s)", removed, removed_time, cutoff)
