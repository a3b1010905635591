"""Depot des photos / Photo repository."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.photo import Photo
from app.services.result import Result
from app.utils.geo import bounding_box, within_radius

logger = logging.getLogger(__name__)


class PhotoRepository:
    """Acces aux metadonnees photo / Photo metadata access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, photo: Photo) -> Result[int]:
        """Enregistrer la photo / Persist photo metadata. Returns the new id."""
        self.session.add(photo)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Error saving photo metadata: %s", exc)
            return Result.fail(str(exc))
        return Result.ok(photo.id)

    async def get_by_id(self, photo_id: int) -> Photo | None:
        return await self.session.get(Photo, photo_id)

    async def exists(self, photo_id: int) -> bool:
        count = await self.session.scalar(select(func.count(Photo.id)).where(Photo.id == photo_id))
        return bool(count)

    async def get_by_user(self, user_id: str) -> list[Photo]:
        result = await self.session.execute(
            select(Photo).where(Photo.user_id == user_id).order_by(Photo.timestamp.desc())
        )
        return list(result.scalars().all())

    async def get_by_date_range(self, start_iso: str, end_iso: str) -> list[Photo]:
        result = await self.session.execute(
            select(Photo)
            .where(Photo.timestamp >= start_iso, Photo.timestamp <= end_iso)
            .order_by(Photo.timestamp)
        )
        return list(result.scalars().all())

    async def get_by_location(self, latitude: float, longitude: float, radius_m: float) -> list[Photo]:
        lat_min, lat_max, lon_min, lon_max = bounding_box(latitude, longitude, radius_m)
        result = await self.session.execute(
            select(Photo).where(
                Photo.latitude.between(lat_min, lat_max),
                Photo.longitude.between(lon_min, lon_max),
            )
        )
        return [
            p for p in result.scalars().all()
            if within_radius(latitude, longitude, p.latitude, p.longitude, radius_m)
        ]

    async def delete(self, photo_id: int) -> Result:
        photo = await self.session.get(Photo, photo_id)
        if photo is None:
            return Result.fail("Photo not found")
        try:
            await self.session.delete(photo)
            await self.session.flush()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Error deleting photo %s: %s", photo_id, exc)
            return Result.fail(str(exc))
        return Result.ok()
