"""Modele Point de controle / Checkpoint model."""

from sqlalchemy import Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Checkpoint(Base):
    """Point de controle d'un site / Checkpoint within a patrol location."""
    __tablename__ = "checkpoints"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    location_id: Mapped[int] = mapped_column(ForeignKey("patrol_locations.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    # Relations
    location: Mapped["PatrolLocation"] = relationship(back_populates="checkpoints")

    def __repr__(self) -> str:
        return f"<Checkpoint {self.name}>"
