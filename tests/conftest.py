"""Fixtures de test / Test fixtures.

Base SQLite en memoire par test, horloge figee, stockage dans tmp_path.
One in-memory SQLite database per test, frozen clock, storage under tmp_path.
"""

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.api.deps import get_clock, get_storage
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models.checkpoint import Checkpoint
from app.models.patrol_location import PatrolLocation
from app.services.storage_service import StorageService
from app.utils.auth import create_access_token
from app.utils.clock import FixedClock

USER_ID = "guard-1"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 5, 1, 22, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage(tmp_path, clock):
    return StorageService(tmp_path / "storage", clock)


@pytest.fixture
async def patrol_site(session_factory):
    """Un site avec trois points / One location with three checkpoints."""
    async with session_factory() as session:
        site = PatrolLocation(name="Warehouse 7", latitude=40.7128, longitude=-74.0060)
        session.add(site)
        await session.flush()
        checkpoints = [
            Checkpoint(location_id=site.id, name="Gate", latitude=40.7129, longitude=-74.0061),
            Checkpoint(location_id=site.id, name="Dock", latitude=40.7131, longitude=-74.0058),
            Checkpoint(location_id=site.id, name="Roof", latitude=40.7126, longitude=-74.0063),
        ]
        session.add_all(checkpoints)
        await session.commit()
        return site.id, [cp.id for cp in checkpoints]


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token(USER_ID)}"}


@pytest.fixture
async def client(session_factory, clock, storage):
    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[get_clock] = lambda: clock
    fastapi_app.dependency_overrides[get_storage] = lambda: storage
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()
