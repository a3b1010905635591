"""Depots sites et points de controle / Patrol location and checkpoint repositories."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.checkpoint import Checkpoint
from app.models.patrol_location import PatrolLocation
from app.utils.geo import bounding_box, within_radius


class PatrolLocationRepository:
    """Acces aux sites / Patrol locations access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> list[PatrolLocation]:
        result = await self.session.execute(select(PatrolLocation).order_by(PatrolLocation.name))
        return list(result.scalars().all())

    async def get_by_id(self, location_id: int) -> PatrolLocation | None:
        return await self.session.get(PatrolLocation, location_id)

    async def exists(self, location_id: int) -> bool:
        count = await self.session.scalar(
            select(func.count(PatrolLocation.id)).where(PatrolLocation.id == location_id)
        )
        return bool(count)

    async def get_nearby(self, latitude: float, longitude: float, radius_m: float) -> list[PatrolLocation]:
        """Sites dans le rayon / Locations within the radius (bbox then Haversine)."""
        lat_min, lat_max, lon_min, lon_max = bounding_box(latitude, longitude, radius_m)
        result = await self.session.execute(
            select(PatrolLocation).where(
                PatrolLocation.latitude.between(lat_min, lat_max),
                PatrolLocation.longitude.between(lon_min, lon_max),
            )
        )
        return [
            loc for loc in result.scalars().all()
            if within_radius(latitude, longitude, loc.latitude, loc.longitude, radius_m)
        ]


class CheckpointRepository:
    """Acces aux points de controle / Checkpoints access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, checkpoint_id: int) -> Checkpoint | None:
        return await self.session.get(Checkpoint, checkpoint_id)

    async def exists(self, checkpoint_id: int) -> bool:
        count = await self.session.scalar(
            select(func.count(Checkpoint.id)).where(Checkpoint.id == checkpoint_id)
        )
        return bool(count)

    async def get_by_location_id(self, location_id: int) -> list[Checkpoint]:
        result = await self.session.execute(
            select(Checkpoint).where(Checkpoint.location_id == location_id).order_by(Checkpoint.id)
        )
        return list(result.scalars().all())

    async def get_nearby(self, latitude: float, longitude: float, radius_m: float) -> list[Checkpoint]:
        """Points dans le rayon / Checkpoints within the radius (bbox then Haversine)."""
        lat_min, lat_max, lon_min, lon_max = bounding_box(latitude, longitude, radius_m)
        result = await self.session.execute(
            select(Checkpoint).where(
                Checkpoint.latitude.between(lat_min, lat_max),
                Checkpoint.longitude.between(lon_min, lon_max),
            )
        )
        return [
            cp for cp in result.scalars().all()
            if within_radius(latitude, longitude, cp.latitude, cp.longitude, radius_m)
        ]
