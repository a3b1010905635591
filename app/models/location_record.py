"""Modele Position agent / Guard location record model."""

from sqlalchemy import Boolean, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class LocationRecord(Base):
    """Position GPS d'un agent / Guard GPS sample (uploaded in batches from the mobile app)."""
    __tablename__ = "location_records"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    accuracy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    timestamp: Mapped[str] = mapped_column(String(32), nullable=False)  # ISO 8601 UTC
    # Passe a True une seule fois / Flips to True once, never back
    is_synced: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[str | None] = mapped_column(String(32))

    __table_args__ = (
        Index("ix_location_records_synced_timestamp", "is_synced", "timestamp"),
        Index("ix_location_records_user_timestamp", "user_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<LocationRecord {self.id} user={self.user_id}>"
