"""Endpoints pointage / Time tracking endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from app.schemas.time import ClockStatusRead, TimeRecordCreate, TimeRecordRead, TimeRecordResponse
from app.services.time_service import TimeTrackingService
from app.api.deps import get_current_user_id, get_time_service, unwrap

router = APIRouter()


@router.post("/clock", response_model=TimeRecordResponse, status_code=201)
async def clock(
    data: TimeRecordCreate,
    user_id: str = Depends(get_current_user_id),
    service: TimeTrackingService = Depends(get_time_service),
):
    """Prise / fin de service / Clock in or out."""
    return unwrap(await service.record(data, user_id))


@router.get("/status", response_model=ClockStatusRead)
async def clock_status(
    user_id: str = Depends(get_current_user_id),
    service: TimeTrackingService = Depends(get_time_service),
):
    return await service.get_status(user_id)


@router.get("/history", response_model=list[TimeRecordRead])
async def clock_history(
    limit: int = Query(50, gt=0, le=1000),
    user_id: str = Depends(get_current_user_id),
    service: TimeTrackingService = Depends(get_time_service),
):
    return await service.get_history(user_id, limit)


@router.get("/range", response_model=list[TimeRecordRead])
async def clock_range(
    start_date: datetime,
    end_date: datetime,
    user_id: str = Depends(get_current_user_id),
    service: TimeTrackingService = Depends(get_time_service),
):
    return await service.get_by_date_range(user_id, start_date, end_date)


@router.delete("/{record_id}", status_code=204)
async def delete_time_record(
    record_id: int,
    user_id: str = Depends(get_current_user_id),
    service: TimeTrackingService = Depends(get_time_service),
):
    await service.delete_record(record_id, user_id)
