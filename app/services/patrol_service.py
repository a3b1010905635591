"""
Service de patrouille / Patrol service.
Verification des points de controle, avancement de ronde, recherches de proximite.
Checkpoint verification, patrol progress, proximity lookups.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from app.models.checkpoint import Checkpoint
from app.models.checkpoint_verification import CheckpointVerification
from app.models.patrol_location import PatrolLocation
from app.repositories.patrol_repository import CheckpointRepository, PatrolLocationRepository
from app.repositories.verification_repository import CheckpointVerificationRepository
from app.schemas.patrol import (
    CheckpointRead,
    CheckpointVerificationRequest,
    CheckpointVerificationResponse,
    PatrolStatusRead,
)
from app.services.errors import NotFoundError, ValidationError
from app.services.result import Result
from app.utils.clock import Clock, to_utc_iso
from app.utils.geo import validate_coordinates

logger = logging.getLogger(__name__)

STATUS_VERIFIED = "Verified"
STATUS_ALREADY_VERIFIED = "AlreadyVerified"


def _to_response(verification: CheckpointVerification, status: str) -> CheckpointVerificationResponse:
    return CheckpointVerificationResponse(
        checkpoint_id=verification.checkpoint_id,
        user_id=verification.user_id,
        timestamp=verification.timestamp,
        latitude=verification.latitude,
        longitude=verification.longitude,
        status=status,
    )


def _checkpoint_read(cp: Checkpoint, verifications: dict[int, CheckpointVerification]) -> CheckpointRead:
    verification = verifications.get(cp.id)
    return CheckpointRead(
        id=cp.id,
        location_id=cp.location_id,
        name=cp.name,
        latitude=cp.latitude,
        longitude=cp.longitude,
        is_verified=verification is not None,
        verification_time=verification.timestamp if verification else None,
    )


def _validate_area(latitude: float, longitude: float, radius_m: float) -> None:
    error = validate_coordinates(latitude, longitude)
    if error:
        raise ValidationError(error)
    if radius_m <= 0:
        raise ValidationError("Radius must be greater than zero meters")


class CheckpointVerifier:
    """Verification idempotente des points de controle / Idempotent checkpoint verification.

    Non verifie -> Verifie, sans retour arriere. La proximite n'est pas controlee ici :
    elle sert uniquement aux listes "a proximite".
    Unverified -> Verified, never back. Proximity is not enforced here; it only feeds
    the "nearby" lists the client consults before verifying.
    """

    def __init__(
        self,
        checkpoints: CheckpointRepository,
        locations: PatrolLocationRepository,
        verifications: CheckpointVerificationRepository,
        clock: Clock,
    ):
        self.checkpoints = checkpoints
        self.locations = locations
        self.verifications = verifications
        self.clock = clock

    async def verify(self, request: CheckpointVerificationRequest | None, user_id: str) -> Result[CheckpointVerificationResponse]:
        if request is None or request.checkpoint_id <= 0:
            raise ValidationError("Invalid checkpoint verification request")
        if not user_id:
            raise ValidationError("User ID is required for checkpoint verification")

        # Point inconnu : on s'arrete avant toute recherche de verification
        # Unknown checkpoint: stop before any verification lookup
        if not await self.checkpoints.exists(request.checkpoint_id):
            raise NotFoundError(f"Checkpoint with ID {request.checkpoint_id} not found")

        existing = await self.verifications.get_by_user_and_checkpoint(user_id, request.checkpoint_id)
        if existing is not None:
            return Result.ok(_to_response(existing, STATUS_ALREADY_VERIFIED))

        verification = CheckpointVerification(
            checkpoint_id=request.checkpoint_id,
            user_id=user_id,
            # Horloge serveur, jamais celle du client / Server clock, never the client's
            timestamp=self.clock.now_iso(),
            latitude=request.latitude,
            longitude=request.longitude,
            is_synced=False,
        )
        try:
            inserted = await self.verifications.add(verification)
        except SQLAlchemyError as exc:
            logger.error("Failed to save verification of checkpoint %s: %s", request.checkpoint_id, exc)
            return Result.fail("Failed to save checkpoint verification")

        # Relire la ligne persistee / Re-read the persisted row
        saved = await self.verifications.get_by_user_and_checkpoint(user_id, request.checkpoint_id)
        if saved is None:
            return Result.fail("Failed to save checkpoint verification")

        # Course perdue : la ligne du gagnant fait foi / Lost race: the winner's row stands
        status = STATUS_VERIFIED if inserted else STATUS_ALREADY_VERIFIED
        logger.info("Checkpoint %s %s for user %s", request.checkpoint_id, status, user_id)
        return Result.ok(_to_response(saved, status))

    async def get_patrol_status(self, location_id: int, user_id: str) -> PatrolStatusRead:
        if location_id <= 0:
            raise ValidationError("Location ID must be greater than zero")
        if not user_id:
            raise ValidationError("User ID is required to get patrol status")
        if not await self.locations.exists(location_id):
            raise NotFoundError(f"Patrol location with ID {location_id} not found")

        checkpoints = await self.checkpoints.get_by_location_id(location_id)
        verifications = await self.verifications.get_by_user_and_location(user_id, location_id)

        verified_ids = {v.checkpoint_id for v in verifications}
        total = len(checkpoints)
        verified = sum(1 for cp in checkpoints if cp.id in verified_ids)
        return PatrolStatusRead(
            location_id=location_id,
            total_checkpoints=total,
            verified_checkpoints=verified,
            completion_percentage=round(verified * 100.0 / total, 2) if total else 0.0,
            last_verification_time=max((v.timestamp for v in verifications), default=None),
            is_complete=total > 0 and verified == total,
        )


class PatrolService:
    """Lectures sites / points / verifications / Locations, checkpoints and verification reads."""

    def __init__(
        self,
        locations: PatrolLocationRepository,
        checkpoints: CheckpointRepository,
        verifications: CheckpointVerificationRepository,
    ):
        self.locations = locations
        self.checkpoints = checkpoints
        self.verifications = verifications

    async def get_locations(self) -> list[PatrolLocation]:
        return await self.locations.get_all()

    async def get_location(self, location_id: int) -> PatrolLocation:
        if location_id <= 0:
            raise ValidationError("Location ID must be greater than zero")
        location = await self.locations.get_by_id(location_id)
        if location is None:
            raise NotFoundError(f"Patrol location with ID {location_id} not found")
        return location

    async def get_checkpoints(self, location_id: int, user_id: str) -> list[CheckpointRead]:
        """Points d'un site avec l'etat de l'agent / Location checkpoints with the user's state."""
        if location_id <= 0:
            raise ValidationError("Location ID must be greater than zero")
        if not await self.locations.exists(location_id):
            raise NotFoundError(f"Patrol location with ID {location_id} not found")
        checkpoints = await self.checkpoints.get_by_location_id(location_id)
        if not checkpoints:
            return []
        verifications = await self.verifications.get_by_user_and_location(user_id, location_id)
        by_checkpoint = {v.checkpoint_id: v for v in verifications}
        return [_checkpoint_read(cp, by_checkpoint) for cp in checkpoints]

    async def get_checkpoint(self, checkpoint_id: int, user_id: str) -> CheckpointRead:
        if checkpoint_id <= 0:
            raise ValidationError("Checkpoint ID must be greater than zero")
        checkpoint = await self.checkpoints.get_by_id(checkpoint_id)
        if checkpoint is None:
            raise NotFoundError(f"Checkpoint with ID {checkpoint_id} not found")
        verification = await self.verifications.get_by_user_and_checkpoint(user_id, checkpoint_id)
        by_checkpoint = {checkpoint_id: verification} if verification else {}
        return _checkpoint_read(checkpoint, by_checkpoint)

    async def get_nearby_checkpoints(
        self, latitude: float, longitude: float, radius_m: float, user_id: str,
    ) -> list[CheckpointRead]:
        _validate_area(latitude, longitude, radius_m)
        checkpoints = await self.checkpoints.get_nearby(latitude, longitude, radius_m)
        if not checkpoints:
            return []
        by_checkpoint = {v.checkpoint_id: v for v in await self.verifications.get_by_user(user_id)}
        return [_checkpoint_read(cp, by_checkpoint) for cp in checkpoints]

    async def get_nearby_locations(self, latitude: float, longitude: float, radius_m: float) -> list[PatrolLocation]:
        _validate_area(latitude, longitude, radius_m)
        return await self.locations.get_nearby(latitude, longitude, radius_m)

    async def get_user_verifications(self, user_id: str) -> list[CheckpointVerification]:
        if not user_id:
            raise ValidationError("User ID is required to get verifications")
        return await self.verifications.get_by_user(user_id)

    async def get_user_verifications_by_date_range(
        self, user_id: str, start_date: datetime, end_date: datetime,
    ) -> list[CheckpointVerification]:
        if not user_id:
            raise ValidationError("User ID is required to get verifications")
        if end_date < start_date:
            raise ValidationError("End date must be greater than or equal to start date")
        return await self.verifications.get_by_user_and_date_range(
            user_id, to_utc_iso(start_date), to_utc_iso(end_date)
        )

    async def is_checkpoint_verified(self, checkpoint_id: int, user_id: str) -> bool:
        if checkpoint_id <= 0:
            raise ValidationError("Checkpoint ID must be greater than zero")
        if not await self.checkpoints.exists(checkpoint_id):
            raise NotFoundError(f"Checkpoint with ID {checkpoint_id} not found")
        return await self.verifications.get_by_user_and_checkpoint(user_id, checkpoint_id) is not None
