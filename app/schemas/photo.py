"""Schemas photos / Photo schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PhotoUploadRequest(BaseModel):
    """Metadonnees d'upload / Upload metadata."""
    user_id: str = Field(min_length=1, max_length=100)
    timestamp: datetime
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

class PhotoUploadResponse(BaseModel):
    id: int
    status: str = "success"

class PhotoRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: str
    timestamp: str
    latitude: float
    longitude: float
    file_path: str
    mime_type: str | None = None
    file_size: int | None = None
