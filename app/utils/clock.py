"""Horloge injectable / Injectable clock.

Les horodatages serveur passent tous par ici (jamais datetime.now() direct dans les services).
Every server-side timestamp goes through here (services never call datetime.now() directly).
"""

from datetime import datetime, timezone


def to_utc_iso(value: datetime) -> str:
    """Normaliser en ISO 8601 UTC / Normalize to ISO 8601 UTC (naive = UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="seconds")


class Clock:
    """Horloge systeme / System clock."""

    def utc_now(self) -> datetime:
        return datetime.now(timezone.utc)

    def now_iso(self) -> str:
        return to_utc_iso(self.utc_now())


class FixedClock(Clock):
    """Horloge figee (tests, rejeu) / Frozen clock (tests, replay)."""

    def __init__(self, now: datetime):
        self.now = now

    def utc_now(self) -> datetime:
        return self.now
