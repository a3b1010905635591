"""Schemas patrouille / Patrol schemas: locations, checkpoints, verifications, status."""

from pydantic import BaseModel, ConfigDict, Field


# ─── PatrolLocation ───

class PatrolLocationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    latitude: float
    longitude: float


# ─── Checkpoint ───

class CheckpointRead(BaseModel):
    """Point de controle + statut pour l'agent / Checkpoint with the caller's verification state."""
    id: int
    location_id: int
    name: str
    latitude: float
    longitude: float
    is_verified: bool = False
    verification_time: str | None = None


# ─── Verification ───

class CheckpointVerificationRequest(BaseModel):
    """Verification demandee par le mobile / Verification claimed by the mobile client."""
    checkpoint_id: int = Field(gt=0)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

class CheckpointVerificationResponse(BaseModel):
    checkpoint_id: int
    user_id: str
    timestamp: str
    latitude: float
    longitude: float
    status: str  # Verified | AlreadyVerified

class CheckpointVerificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: str
    checkpoint_id: int
    timestamp: str
    latitude: float
    longitude: float


# ─── Status ───

class PatrolStatusRead(BaseModel):
    """Avancement de la ronde / Patrol progress for one user at one location."""
    location_id: int
    total_checkpoints: int
    verified_checkpoints: int
    completion_percentage: float = 0.0
    last_verification_time: str | None = None
    is_complete: bool = False
