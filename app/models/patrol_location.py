"""Modele Site de patrouille / Patrol location model."""

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class PatrolLocation(Base):
    """Site surveille (contient des points de controle) / Patrolled site (holds checkpoints)."""
    __tablename__ = "patrol_locations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    # Relations
    checkpoints: Mapped[list["Checkpoint"]] = relationship(back_populates="location")

    def __repr__(self) -> str:
        return f"<PatrolLocation {self.name}>"
