"""
Service photos / Photo service.

Upload en deux temps sans transaction distribuee : fichier d'abord, metadonnees
ensuite, suppression du fichier si les metadonnees echouent. Le pire cas est un
fichier orphelin (ramasse plus tard), jamais une ligne pointant vers un fichier absent.
Two-step upload without a distributed transaction: blob first, metadata second,
blob deleted if the metadata write fails. Worst case is an orphaned blob (collected
later), never a row pointing at a missing blob.
"""

import io
import logging
from datetime import datetime
from typing import BinaryIO

from app.models.photo import Photo
from app.repositories.photo_repository import PhotoRepository
from app.schemas.photo import PhotoUploadRequest, PhotoUploadResponse
from app.services.errors import NotFoundError, ValidationError
from app.services.result import Result
from app.services.storage_service import StorageService
from app.utils.clock import to_utc_iso
from app.utils.geo import validate_coordinates

logger = logging.getLogger(__name__)


class PhotoUploadCoordinator:
    """Coordination stockage fichier + metadonnees / Blob store + metadata coordination."""

    def __init__(self, repository: PhotoRepository, storage: StorageService, folder: str = "photos"):
        self.repository = repository
        self.storage = storage
        self.folder = folder

    async def upload(
        self,
        request: PhotoUploadRequest | None,
        stream: BinaryIO | None,
        content_type: str = "image/jpeg",
        file_size: int | None = None,
    ) -> Result[PhotoUploadResponse]:
        if request is None:
            raise ValidationError("Upload request cannot be null")
        if stream is None:
            raise ValidationError("Photo stream cannot be null")
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError("Content type must be an image type")

        # 1. Fichier / Blob
        try:
            stored = await self.storage.store(stream, f"{self.folder}/{request.user_id}", content_type)
        except Exception as exc:
            logger.error("Photo storage raised for user %s: %s", request.user_id, exc)
            stored = Result.fail(str(exc))
        if not stored.succeeded:
            return Result.fail(f"Failed to store photo: {stored.message}")
        file_path = stored.data

        # 2. Metadonnees / Metadata
        photo = Photo(
            user_id=request.user_id,
            timestamp=to_utc_iso(request.timestamp),
            latitude=request.latitude,
            longitude=request.longitude,
            file_path=file_path,
            mime_type=content_type,
            file_size=file_size,
        )
        try:
            added = await self.repository.add(photo)
        except Exception as exc:
            logger.error("Photo metadata write raised for %s: %s", file_path, exc)
            added = Result.fail(str(exc))
        if not added.succeeded:
            # Compensation best-effort, son echec n'est que journalise
            # Best-effort compensation; its own failure is only logged
            await self._discard_blob(file_path)
            return Result.fail(f"Failed to save photo metadata: {added.message}")

        logger.info("Photo %s uploaded by user %s", added.data, request.user_id)
        return Result.ok(PhotoUploadResponse(id=added.data, status="success"))

    async def delete_photo(self, photo_id: int) -> Result:
        """Supprimer fichier puis ligne / Delete blob, then row.

        Un echec sur le fichier n'empeche pas la suppression de la ligne.
        A blob failure does not prevent the row deletion; only the row failure is surfaced.
        """
        if photo_id <= 0:
            raise ValidationError("Invalid photo ID")
        photo = await self.repository.get_by_id(photo_id)
        if photo is None:
            raise NotFoundError("Photo not found")

        try:
            blob = await self.storage.delete(photo.file_path)
        except Exception as exc:
            blob = Result.fail(str(exc))
        if not blob.succeeded:
            logger.warning("Failed to delete photo file %s: %s", photo.file_path, blob.message)

        deleted = await self.repository.delete(photo_id)
        if not deleted.succeeded:
            return Result.fail(f"Failed to delete photo record: {deleted.message}")
        return Result.ok()

    async def get_photo(self, photo_id: int) -> Photo:
        if photo_id <= 0:
            raise ValidationError("Invalid photo ID")
        photo = await self.repository.get_by_id(photo_id)
        if photo is None:
            raise NotFoundError("Photo not found")
        return photo

    async def get_photo_stream(self, photo_id: int) -> Result[io.BytesIO]:
        photo = await self.get_photo(photo_id)
        if not await self.storage.exists(photo.file_path):
            return Result.fail("Photo file not found")
        content = await self.storage.read(photo.file_path)
        if not content.succeeded:
            return Result.fail(f"Failed to retrieve photo file: {content.message}")
        return Result.ok(content.data)

    async def get_photos_by_user(self, user_id: str) -> list[Photo]:
        if not user_id:
            raise ValidationError("User ID cannot be null or empty")
        return await self.repository.get_by_user(user_id)

    async def get_photos_by_location(self, latitude: float, longitude: float, radius_m: float) -> list[Photo]:
        error = validate_coordinates(latitude, longitude)
        if error:
            raise ValidationError(error)
        if radius_m <= 0:
            raise ValidationError("Radius must be greater than 0 meters")
        return await self.repository.get_by_location(latitude, longitude, radius_m)

    async def get_photos_by_date_range(self, start_date: datetime, end_date: datetime) -> list[Photo]:
        if start_date > end_date:
            raise ValidationError("Start date must be before or equal to end date")
        return await self.repository.get_by_date_range(to_utc_iso(start_date), to_utc_iso(end_date))

    async def _discard_blob(self, file_path: str) -> None:
        """Compensation : supprimer le fichier orphelin / Compensation: delete the orphaned blob."""
        try:
            cleanup = await self.storage.delete(file_path)
        except Exception as exc:
            logger.warning("Orphaned photo blob %s left behind: %s", file_path, exc)
            return
        if not cleanup.succeeded:
            logger.warning("Orphaned photo blob %s left behind: %s", file_path, cleanup.message)
