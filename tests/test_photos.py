"""Tests des photos / Photo tests: two-step upload with compensation."""

import io
from datetime import datetime, timedelta, timezone

import pytest

from app.repositories.photo_repository import PhotoRepository
from app.schemas.photo import PhotoUploadRequest
from app.services.errors import NotFoundError, ValidationError
from app.services.photo_service import PhotoUploadCoordinator
from app.services.result import Result
from app.services.storage_service import StorageService

JPEG = b"\xff\xd8\xff\xe0fake-jpeg-body"


def _request(user_id: str = "guard-1", lat: float = 40.7128, lon: float = -74.0060) -> PhotoUploadRequest:
    return PhotoUploadRequest(
        user_id=user_id,
        timestamp=datetime(2024, 5, 1, 22, 30, tzinfo=timezone.utc),
        latitude=lat,
        longitude=lon,
    )


class FakeStorage:
    """Stockage en memoire avec pannes injectables / In-memory storage with injectable failures."""

    def __init__(self, store_fails=False, delete_fails=False, delete_raises=False):
        self.store_fails = store_fails
        self.delete_fails = delete_fails
        self.delete_raises = delete_raises
        self.stored: list[str] = []
        self.deleted: list[str] = []

    async def store(self, stream, folder, content_type):
        if self.store_fails:
            return Result.fail("disk full")
        path = f"{folder}/blob-{len(self.stored) + 1}.jpg"
        self.stored.append(path)
        return Result.ok(path)

    async def delete(self, file_path):
        self.deleted.append(file_path)
        if self.delete_raises:
            raise OSError("storage offline")
        if self.delete_fails:
            return Result.fail("permission denied")
        return Result.ok()

    async def exists(self, file_path):
        return file_path in self.stored and file_path not in self.deleted

    async def read(self, file_path):
        return Result.ok(io.BytesIO(JPEG))


class FakePhotoRepository:
    def __init__(self, add_fails=False, delete_fails=False):
        self.add_fails = add_fails
        self.delete_fails = delete_fails
        self.rows: dict[int, object] = {}

    async def add(self, photo):
        if self.add_fails:
            return Result.fail("constraint violated")
        photo.id = len(self.rows) + 1
        self.rows[photo.id] = photo
        return Result.ok(photo.id)

    async def get_by_id(self, photo_id):
        return self.rows.get(photo_id)

    async def delete(self, photo_id):
        if self.delete_fails:
            return Result.fail("database locked")
        self.rows.pop(photo_id, None)
        return Result.ok()


# ─── Upload ───

@pytest.mark.asyncio
async def test_upload_success():
    storage, repo = FakeStorage(), FakePhotoRepository()
    result = await PhotoUploadCoordinator(repo, storage).upload(_request(), io.BytesIO(JPEG), file_size=len(JPEG))

    assert result.succeeded
    assert result.data.id == 1
    assert result.data.status == "success"
    photo = repo.rows[1]
    assert photo.file_path == storage.stored[0]
    assert photo.file_path.startswith("photos/guard-1/")
    assert photo.timestamp == "2024-05-01T22:30:00+00:00"
    assert photo.file_size == len(JPEG)
    assert storage.deleted == []


@pytest.mark.asyncio
async def test_metadata_failure_deletes_stored_blob_once():
    storage, repo = FakeStorage(), FakePhotoRepository(add_fails=True)
    result = await PhotoUploadCoordinator(repo, storage).upload(_request(), io.BytesIO(JPEG))

    assert not result.succeeded
    assert result.message.startswith("Failed to save photo metadata")
    assert storage.deleted == storage.stored
    assert len(storage.deleted) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("storage", [FakeStorage(delete_fails=True), FakeStorage(delete_raises=True)])
async def test_failed_compensation_still_reports_metadata_failure(storage):
    result = await PhotoUploadCoordinator(FakePhotoRepository(add_fails=True), storage).upload(
        _request(), io.BytesIO(JPEG)
    )
    assert not result.succeeded
    assert result.message.startswith("Failed to save photo metadata")
    assert len(storage.deleted) == 1


@pytest.mark.asyncio
async def test_storage_failure_never_touches_repository():
    repo = FakePhotoRepository()
    result = await PhotoUploadCoordinator(repo, FakeStorage(store_fails=True)).upload(_request(), io.BytesIO(JPEG))
    assert not result.succeeded
    assert result.message == "Failed to store photo: disk full"
    assert repo.rows == {}


@pytest.mark.asyncio
async def test_upload_rejects_missing_inputs():
    storage = FakeStorage()
    coordinator = PhotoUploadCoordinator(FakePhotoRepository(), storage)
    with pytest.raises(ValidationError):
        await coordinator.upload(None, io.BytesIO(JPEG))
    with pytest.raises(ValidationError):
        await coordinator.upload(_request(), None)
    with pytest.raises(ValidationError):
        await coordinator.upload(_request(), io.BytesIO(JPEG), content_type="application/pdf")
    assert storage.stored == []


# ─── Delete ───

@pytest.mark.asyncio
async def test_delete_blob_failure_still_deletes_row():
    storage, repo = FakeStorage(delete_fails=True), FakePhotoRepository()
    coordinator = PhotoUploadCoordinator(repo, storage)
    uploaded = await coordinator.upload(_request(), io.BytesIO(JPEG))

    result = await coordinator.delete_photo(uploaded.data.id)

    assert result.succeeded
    assert repo.rows == {}


@pytest.mark.asyncio
async def test_delete_row_failure_is_surfaced():
    storage, repo = FakeStorage(), FakePhotoRepository(delete_fails=True)
    coordinator = PhotoUploadCoordinator(repo, storage)
    uploaded = await coordinator.upload(_request(), io.BytesIO(JPEG))

    result = await coordinator.delete_photo(uploaded.data.id)

    assert not result.succeeded
    assert result.message == "Failed to delete photo record: database locked"


@pytest.mark.asyncio
async def test_delete_unknown_or_invalid_photo():
    coordinator = PhotoUploadCoordinator(FakePhotoRepository(), FakeStorage())
    with pytest.raises(NotFoundError):
        await coordinator.delete_photo(12)
    with pytest.raises(ValidationError):
        await coordinator.delete_photo(0)


# ─── Disque + base / Disk + database ───

@pytest.mark.asyncio
async def test_upload_read_delete_on_disk(db, storage):
    coordinator = PhotoUploadCoordinator(PhotoRepository(db), storage)

    uploaded = await coordinator.upload(_request(), io.BytesIO(JPEG), file_size=len(JPEG))
    assert uploaded.succeeded
    photo = await coordinator.get_photo(uploaded.data.id)
    assert photo.file_path.endswith(".jpg")
    # Nom horodate par l'horloge injectee / Name stamped by the injected clock
    assert photo.file_path.startswith("photos/guard-1/20240501220000_")
    assert (storage.base_path / photo.file_path).read_bytes() == JPEG

    stream = await coordinator.get_photo_stream(photo.id)
    assert stream.data.read() == JPEG

    deleted = await coordinator.delete_photo(photo.id)
    assert deleted.succeeded
    assert not (storage.base_path / photo.file_path).exists()
    with pytest.raises(NotFoundError):
        await coordinator.get_photo(photo.id)


@pytest.mark.asyncio
async def test_photo_queries(db, storage):
    coordinator = PhotoUploadCoordinator(PhotoRepository(db), storage)
    await coordinator.upload(_request(), io.BytesIO(JPEG))
    await coordinator.upload(_request("guard-2", 34.0522, -118.2437), io.BytesIO(JPEG))

    assert len(await coordinator.get_photos_by_user("guard-1")) == 1
    nearby = await coordinator.get_photos_by_location(40.7128, -74.0060, 50)
    assert [p.user_id for p in nearby] == ["guard-1"]
    stamp = datetime(2024, 5, 1, 22, 30, tzinfo=timezone.utc)
    assert len(await coordinator.get_photos_by_date_range(stamp, stamp + timedelta(minutes=1))) == 2
    with pytest.raises(ValidationError):
        await coordinator.get_photos_by_date_range(stamp, stamp - timedelta(days=1))


@pytest.mark.asyncio
async def test_storage_refuses_paths_outside_base(tmp_path):
    storage = StorageService(tmp_path / "blobs")
    (tmp_path / "secret.txt").write_text("keep out")

    assert not (await storage.read("../secret.txt")).succeeded
    assert not (await storage.delete("../secret.txt")).succeeded
    assert not await storage.exists("../secret.txt")
    assert not (await storage.store(io.BytesIO(JPEG), "../../escape", "image/png")).succeeded
    assert (tmp_path / "secret.txt").exists()


@pytest.mark.asyncio
async def test_storage_delete_missing_file(storage):
    result = await storage.delete("photos/none.jpg")
    assert not result.succeeded
    assert result.message == "File not found"
