"""Endpoints positions agents / Guard location endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app.config import settings
from app.rate_limit import limiter
from app.schemas.location import (
    LocationBatchCreate,
    LocationBatchRequest,
    LocationRead,
    LocationSyncResponse,
)
from app.services.location_service import LocationBatchProcessor, LocationQueryService
from app.services.location_sync import UnsyncedLocationSyncer
from app.services.sync_result import SyncResult
from app.api.deps import (
    get_batch_processor,
    get_current_user_id,
    get_location_queries,
    get_location_syncer,
)

router = APIRouter()


def _to_response(result: SyncResult) -> LocationSyncResponse:
    return LocationSyncResponse(
        synced_ids=result.synced_ids,
        failed_ids=result.failed_ids,
        success_count=result.success_count,
        failure_count=result.failure_count,
        has_failures=result.has_failures,
    )


@router.post("/batch", response_model=LocationSyncResponse)
@limiter.limit(settings.RATE_LIMIT_LOCATION)
async def upload_location_batch(
    request: Request,
    data: LocationBatchCreate,
    user_id: str = Depends(get_current_user_id),
    processor: LocationBatchProcessor = Depends(get_batch_processor),
):
    """Batch de positions GPS / GPS location batch upload."""
    result = await processor.process_batch(LocationBatchRequest(user_id=user_id, locations=data.locations))
    return _to_response(result)


@router.post("/sync", response_model=LocationSyncResponse)
async def sync_pending_locations(
    batch_size: int = Query(50, gt=0, le=1000),
    user_id: str = Depends(get_current_user_id),
    syncer: UnsyncedLocationSyncer = Depends(get_location_syncer),
):
    """Lancer un cycle de synchro / Run one sync cycle on demand."""
    return _to_response(await syncer.sync_pending(batch_size))


@router.get("/history", response_model=list[LocationRead])
async def location_history(
    start_time: datetime,
    end_time: datetime,
    user_id: str = Depends(get_current_user_id),
    queries: LocationQueryService = Depends(get_location_queries),
):
    """Historique de l'agent / Caller's location history."""
    return await queries.get_history(user_id, start_time, end_time)


@router.get("/current", response_model=LocationRead)
async def current_location(
    user_id: str = Depends(get_current_user_id),
    queries: LocationQueryService = Depends(get_location_queries),
):
    """Derniere position / Latest location."""
    record = await queries.get_latest(user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="No location found")
    return record


@router.get("/recent", response_model=list[LocationRead])
async def recent_locations(
    limit: int = 100,
    user_id: str = Depends(get_current_user_id),
    queries: LocationQueryService = Depends(get_location_queries),
):
    """N dernieres positions / Latest N locations."""
    return await queries.get_recent(user_id, limit)
