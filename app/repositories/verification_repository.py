"""Depot des verifications / Checkpoint verification repository."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.checkpoint import Checkpoint
from app.models.checkpoint_verification import CheckpointVerification

logger = logging.getLogger(__name__)


class CheckpointVerificationRepository:
    """Acces aux verifications / Verifications access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_checkpoint(self, user_id: str, checkpoint_id: int) -> CheckpointVerification | None:
        result = await self.session.execute(
            select(CheckpointVerification).where(
                CheckpointVerification.user_id == user_id,
                CheckpointVerification.checkpoint_id == checkpoint_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_user_and_location(self, user_id: str, location_id: int) -> list[CheckpointVerification]:
        result = await self.session.execute(
            select(CheckpointVerification)
            .join(Checkpoint, CheckpointVerification.checkpoint_id == Checkpoint.id)
            .where(
                CheckpointVerification.user_id == user_id,
                Checkpoint.location_id == location_id,
            )
            .order_by(CheckpointVerification.timestamp)
        )
        return list(result.scalars().all())

    async def get_by_user(self, user_id: str) -> list[CheckpointVerification]:
        result = await self.session.execute(
            select(CheckpointVerification)
            .where(CheckpointVerification.user_id == user_id)
            .order_by(CheckpointVerification.timestamp)
        )
        return list(result.scalars().all())

    async def get_by_user_and_date_range(self, user_id: str, start_iso: str, end_iso: str) -> list[CheckpointVerification]:
        result = await self.session.execute(
            select(CheckpointVerification)
            .where(
                CheckpointVerification.user_id == user_id,
                CheckpointVerification.timestamp >= start_iso,
                CheckpointVerification.timestamp <= end_iso,
            )
            .order_by(CheckpointVerification.timestamp)
        )
        return list(result.scalars().all())

    async def add(self, verification: CheckpointVerification) -> bool:
        """Insert-if-absent. False si (user, checkpoint) existe deja / False if the pair already exists.

        La contrainte unique arbitre les verifications concurrentes.
        The unique constraint arbitrates concurrent verifications.
        """
        self.session.add(verification)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            logger.info(
                "Verification already recorded for user %s checkpoint %s",
                verification.user_id, verification.checkpoint_id,
            )
            return False
        return True
