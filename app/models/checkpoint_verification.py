"""Modele Verification de point de controle / Checkpoint verification model."""

from sqlalchemy import Boolean, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class CheckpointVerification(Base):
    """Passage d'un agent sur un point de controle / A guard's verification of a checkpoint.

    Une seule verification par (agent, point) : la contrainte unique tranche les courses.
    One verification per (user, checkpoint): the unique constraint settles concurrent inserts.
    """
    __tablename__ = "checkpoint_verifications"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    checkpoint_id: Mapped[int] = mapped_column(ForeignKey("checkpoints.id"), nullable=False, index=True)
    timestamp: Mapped[str] = mapped_column(String(32), nullable=False)  # ISO 8601 UTC, horloge serveur
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    is_synced: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "checkpoint_id", name="uq_checkpoint_verifications_user_checkpoint"),
    )

    def __repr__(self) -> str:
        return f"<CheckpointVerification user={self.user_id} checkpoint={self.checkpoint_id}>"
