"""Modele Photo terrain / Field photo model."""

from sqlalchemy import Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Photo(Base):
    """Photo prise par un agent / Photo captured by a guard.

    file_path pointe toujours vers un fichier stocke / file_path always points at a stored blob.
    """
    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    timestamp: Mapped[str] = mapped_column(String(32), nullable=False)  # ISO 8601 UTC
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    mime_type: Mapped[str | None] = mapped_column(String(50))
    file_size: Mapped[int | None] = mapped_column(Integer)

    __table_args__ = (
        Index("ix_photos_user_timestamp", "user_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<Photo {self.id} user={self.user_id}>"
