"""Tests API / API tests."""

import pytest

from app.utils.auth import create_access_token


@pytest.mark.asyncio
async def test_root(client):
    resp = await client.get("/api/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "running"


@pytest.mark.asyncio
async def test_requires_token(client):
    resp = await client.get("/api/v1/patrol/locations")
    assert resp.status_code in (401, 403)
    resp = await client.get("/api/v1/patrol/locations", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_location_batch_and_sync(client, auth_headers):
    body = {"locations": [
        {"latitude": 40.7128, "longitude": -74.0060, "accuracy": 4.5, "timestamp": "2024-05-01T21:00:00Z"},
        {"latitude": 40.7130, "longitude": -74.0062, "accuracy": 3.0, "timestamp": "2024-05-01T21:00:30Z"},
    ]}
    resp = await client.post("/api/v1/location/batch", json=body, headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["success_count"] == 2
    assert data["has_failures"] is False

    resp = await client.get("/api/v1/location/current", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["timestamp"] == "2024-05-01T21:00:30+00:00"
    assert resp.json()["is_synced"] is False

    resp = await client.post("/api/v1/location/sync", params={"batch_size": 10}, headers=auth_headers)
    assert resp.status_code == 200
    assert sorted(resp.json()["synced_ids"]) == sorted(data["synced_ids"])

    resp = await client.get("/api/v1/location/recent", params={"limit": 5}, headers=auth_headers)
    assert all(r["is_synced"] for r in resp.json())


@pytest.mark.asyncio
async def test_location_batch_validation(client, auth_headers):
    resp = await client.post("/api/v1/location/batch", json={"locations": []}, headers=auth_headers)
    assert resp.status_code == 422
    bad = {"locations": [{"latitude": 120.0, "longitude": 0.0}]}
    resp = await client.post("/api/v1/location/batch", json=bad, headers=auth_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("batch_size", [0, -1, 1001])
async def test_sync_rejects_out_of_range_batch_size(client, auth_headers, batch_size):
    resp = await client.post("/api/v1/location/sync", params={"batch_size": batch_size}, headers=auth_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_current_location_not_found(client, auth_headers):
    resp = await client.get("/api/v1/location/current", headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_verify_flow(client, auth_headers, patrol_site):
    site_id, checkpoint_ids = patrol_site
    body = {"checkpoint_id": checkpoint_ids[0], "latitude": 40.7129, "longitude": -74.0061}

    resp = await client.post("/api/v1/patrol/verify", json=body, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "Verified"
    resp = await client.post("/api/v1/patrol/verify", json=body, headers=auth_headers)
    assert resp.json()["status"] == "AlreadyVerified"

    resp = await client.get(f"/api/v1/patrol/locations/{site_id}/status", headers=auth_headers)
    assert resp.status_code == 200
    status = resp.json()
    assert status["total_checkpoints"] == 3
    assert status["verified_checkpoints"] == 1
    assert status["is_complete"] is False

    resp = await client.get(f"/api/v1/patrol/checkpoints/{checkpoint_ids[0]}/verified", headers=auth_headers)
    assert resp.json() is True


@pytest.mark.asyncio
async def test_verify_unknown_checkpoint(client, auth_headers, patrol_site):
    body = {"checkpoint_id": 999, "latitude": 40.7129, "longitude": -74.0061}
    resp = await client.post("/api/v1/patrol/verify", json=body, headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_nearby_locations(client, auth_headers, patrol_site):
    site_id, _ = patrol_site
    resp = await client.get(
        "/api/v1/patrol/locations/nearby",
        params={"latitude": 40.7128, "longitude": -74.0060, "radius": 500},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert [loc["id"] for loc in resp.json()] == [site_id]


@pytest.mark.asyncio
async def test_photo_lifecycle(client, auth_headers):
    files = {"file": ("gate.jpg", b"\xff\xd8\xff\xe0fake", "image/jpeg")}
    form = {"latitude": "40.7128", "longitude": "-74.0060", "timestamp": "2024-05-01T22:30:00Z"}

    resp = await client.post("/api/v1/photos/upload", files=files, data=form, headers=auth_headers)
    assert resp.status_code == 201
    photo_id = resp.json()["id"]

    resp = await client.get(f"/api/v1/photos/{photo_id}/file", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.content == b"\xff\xd8\xff\xe0fake"

    resp = await client.get("/api/v1/photos/my", headers=auth_headers)
    assert [p["id"] for p in resp.json()] == [photo_id]

    resp = await client.delete(f"/api/v1/photos/{photo_id}", headers=auth_headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/v1/photos/{photo_id}", headers=auth_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_photo_upload_rejects_empty_file(client, auth_headers):
    files = {"file": ("empty.jpg", b"", "image/jpeg")}
    form = {"latitude": "40.7128", "longitude": "-74.0060", "timestamp": "2024-05-01T22:30:00Z"}
    resp = await client.post("/api/v1/photos/upload", files=files, data=form, headers=auth_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_time_clock_flow(client, auth_headers):
    resp = await client.get("/api/v1/time/status", headers=auth_headers)
    assert resp.json()["status"] == "out"

    resp = await client.post("/api/v1/time/clock", json={"type": "in"}, headers=auth_headers)
    assert resp.status_code == 201
    record_id = resp.json()["id"]

    resp = await client.post("/api/v1/time/clock", json={"type": "in"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User is already clocked in"

    resp = await client.get("/api/v1/time/status", headers=auth_headers)
    assert resp.json() == {"status": "in", "last_timestamp": "2024-05-01T22:00:00+00:00"}

    resp = await client.get("/api/v1/time/history", headers=auth_headers)
    assert [r["id"] for r in resp.json()] == [record_id]

    resp = await client.delete(f"/api/v1/time/{record_id}", headers=auth_headers)
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_time_clock_rejects_unknown_type(client, auth_headers):
    resp = await client.post("/api/v1/time/clock", json={"type": "break"}, headers=auth_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_time_record_of_another_user_cannot_be_deleted(client, auth_headers):
    resp = await client.post("/api/v1/time/clock", json={"type": "in"}, headers=auth_headers)
    record_id = resp.json()["id"]
    other = {"Authorization": f"Bearer {create_access_token('guard-2')}"}

    resp = await client.delete(f"/api/v1/time/{record_id}", headers=other)

    assert resp.status_code == 403
    resp = await client.get("/api/v1/time/status", headers=auth_headers)
    assert resp.json()["status"] == "in"
