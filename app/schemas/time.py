"""Schemas pointage / Time tracking schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TimeRecordCreate(BaseModel):
    """Pointage saisi sur le mobile / Clock event captured on the phone."""
    type: Literal["in", "out"]
    timestamp: datetime | None = None  # None -> horloge serveur / server clock
    latitude: float = Field(default=0.0, ge=-90, le=90)
    longitude: float = Field(default=0.0, ge=-180, le=180)

class TimeRecordResponse(BaseModel):
    id: int
    status: str = "success"

class TimeRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: str
    type: str
    timestamp: str
    latitude: float
    longitude: float

class ClockStatusRead(BaseModel):
    """Etat de service / Duty status."""
    status: str  # in | out
    last_timestamp: str | None = None
