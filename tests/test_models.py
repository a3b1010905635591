"""Tests des modèles / Model tests."""

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.checkpoint import Checkpoint
from app.models.checkpoint_verification import CheckpointVerification
from app.models.location_record import LocationRecord
from app.models.patrol_location import PatrolLocation
from app.models.photo import Photo


def test_location_record_repr():
    r = LocationRecord(id=7, user_id="guard-1", latitude=1.0, longitude=2.0, timestamp="2024-05-01T22:00:00+00:00")
    assert "guard-1" in repr(r)


def test_patrol_models_repr():
    assert "Warehouse" in repr(PatrolLocation(id=1, name="Warehouse", latitude=0.0, longitude=0.0))
    assert "Gate" in repr(Checkpoint(id=2, location_id=1, name="Gate", latitude=0.0, longitude=0.0))
    assert "guard-1" in repr(Photo(id=3, user_id="guard-1", timestamp="t", latitude=0.0,
                                   longitude=0.0, file_path="photos/a.jpg"))


@pytest.mark.asyncio
async def test_location_record_defaults_to_unsynced(db):
    record = LocationRecord(user_id="guard-1", latitude=1.0, longitude=2.0, timestamp="2024-05-01T22:00:00+00:00")
    db.add(record)
    await db.flush()
    assert record.is_synced is False
    assert record.accuracy == 0.0


@pytest.mark.asyncio
async def test_verification_unique_per_user_and_checkpoint(db, patrol_site):
    _, checkpoint_ids = patrol_site
    for _ in range(2):
        db.add(CheckpointVerification(
            user_id="guard-1", checkpoint_id=checkpoint_ids[0], timestamp="2024-05-01T22:00:00+00:00",
            latitude=40.0, longitude=-74.0,
        ))
    with pytest.raises(IntegrityError):
        await db.flush()
