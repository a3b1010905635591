"""Modele Pointage / Time record (clock in/out) model."""

from sqlalchemy import Boolean, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

CLOCK_IN = "in"
CLOCK_OUT = "out"


class TimeRecord(Base):
    """Prise / fin de service d'un agent / A guard's clock-in or clock-out event."""
    __tablename__ = "time_records"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(3), nullable=False)  # in | out
    timestamp: Mapped[str] = mapped_column(String(32), nullable=False)  # ISO 8601 UTC
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_synced: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_time_records_user_timestamp", "user_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<TimeRecord {self.type} user={self.user_id} at={self.timestamp}>"
