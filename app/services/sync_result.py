"""Resultat de synchronisation par element / Per-item sync outcome."""

from dataclasses import dataclass, field


@dataclass
class SyncResult:
    """Ids synchronises / en echec, ordonnes, uniques et disjoints.

    Synced / failed ids: ordered, unique, disjoint. Built per batch call, never persisted.
    """
    synced_ids: list[int] = field(default_factory=list)
    failed_ids: list[int] = field(default_factory=list)

    def add_synced(self, record_id: int) -> None:
        if record_id in self.synced_ids or record_id in self.failed_ids:
            return
        self.synced_ids.append(record_id)

    def add_failed(self, record_id: int) -> None:
        if record_id in self.failed_ids:
            return
        # Un echec confirme l'emporte / A confirmed failure wins
        if record_id in self.synced_ids:
            self.synced_ids.remove(record_id)
        self.failed_ids.append(record_id)

    @property
    def has_failures(self) -> bool:
        return len(self.failed_ids) > 0

    @property
    def success_count(self) -> int:
        return len(self.synced_ids)

    @property
    def failure_count(self) -> int:
        return len(self.failed_ids)
