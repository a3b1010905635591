"""Schemas positions / Location schemas: batch upload, sync, history."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ─── Upload ───

class LocationSampleCreate(BaseModel):
    """Position GPS capturee hors ligne / GPS sample captured offline."""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: float = Field(default=0.0, ge=0)
    timestamp: datetime | None = None  # None -> horloge serveur / server clock

class LocationBatchCreate(BaseModel):
    """Corps HTTP du batch / HTTP batch body."""
    locations: list[LocationSampleCreate] = Field(min_length=1, max_length=1000)

class LocationBatchRequest(BaseModel):
    """Batch rattache a un agent / Batch bound to a user (service input)."""
    user_id: str = Field(min_length=1, max_length=100)
    locations: list[LocationSampleCreate] | None = None


# ─── Sync ───

class LocationSyncResponse(BaseModel):
    """Resultat par element / Per-item outcome."""
    synced_ids: list[int] = []
    failed_ids: list[int] = []
    success_count: int = 0
    failure_count: int = 0
    has_failures: bool = False


# ─── Read ───

class LocationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: str
    latitude: float
    longitude: float
    accuracy: float
    timestamp: str
    is_synced: bool
