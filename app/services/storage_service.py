"""
Service de stockage des fichiers / File storage service.
Stocke les photos sur disque sous STORAGE_BASE_PATH ; les chemins retournes sont relatifs.
Stores photos on disk under STORAGE_BASE_PATH; returned paths are relative to it.
"""

import io
import logging
import uuid
from pathlib import Path
from typing import BinaryIO

from app.services.result import Result
from app.utils.clock import Clock

logger = logging.getLogger(__name__)


class StorageService:
    """Stockage blob local / Local blob storage."""

    def __init__(self, base_path: str | Path, clock: Clock | None = None):
        self.base_path = Path(base_path).resolve()
        self.clock = clock or Clock()

    def _resolve(self, file_path: str) -> Path | None:
        """Chemin absolu, None s'il sort de la base / Absolute path, None if it escapes the base."""
        if not file_path:
            return None
        full = (self.base_path / file_path).resolve()
        if full != self.base_path and self.base_path not in full.parents:
            return None
        return full

    @staticmethod
    def _extension(content_type: str) -> str:
        return content_type.split("/")[-1].split(";")[0].strip().replace("jpeg", "jpg") or "bin"

    async def store(self, stream: BinaryIO, folder: str, content_type: str) -> Result[str]:
        """Ecrire le flux / Write the stream. Returns the relative file path."""
        if stream is None:
            return Result.fail("File stream is null or cannot be read")
        if not content_type:
            return Result.fail("Content type cannot be null or empty")

        stamp = self.clock.utc_now().strftime("%Y%m%d%H%M%S")
        file_name = f"{stamp}_{uuid.uuid4().hex[:12]}.{self._extension(content_type)}"
        relative = f"{folder.strip('/')}/{file_name}" if folder else file_name
        target = self._resolve(relative)
        if target is None:
            return Result.fail(f"Invalid storage folder: {folder}")

        try:
            content = stream.read()
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except (OSError, ValueError) as exc:
            logger.error("Error storing file %s: %s", relative, exc)
            return Result.fail(f"Error storing file: {exc}")

        logger.info("File stored at %s (%d bytes)", relative, len(content))
        return Result.ok(relative, "File stored successfully")

    async def read(self, file_path: str) -> Result[io.BytesIO]:
        """Lire le fichier en memoire / Read the file into memory."""
        target = self._resolve(file_path)
        if target is None:
            return Result.fail("Invalid file path")
        if not target.is_file():
            return Result.fail("File not found")
        try:
            content = target.read_bytes()
        except OSError as exc:
            logger.error("Error retrieving file %s: %s", file_path, exc)
            return Result.fail(f"Error retrieving file: {exc}")
        return Result.ok(io.BytesIO(content), "File retrieved successfully")

    async def delete(self, file_path: str) -> Result:
        target = self._resolve(file_path)
        if target is None:
            return Result.fail("Invalid file path")
        if not target.is_file():
            return Result.fail("File not found")
        try:
            target.unlink()
        except OSError as exc:
            logger.error("Error deleting file %s: %s", file_path, exc)
            return Result.fail(f"Error deleting file: {exc}")
        logger.info("File deleted at %s", file_path)
        return Result.ok(message="File deleted successfully")

    async def exists(self, file_path: str) -> bool:
        target = self._resolve(file_path)
        return target is not None and target.is_file()
