"""
In-Memory Storage Implementation

Holds state in process memory. Used by tests and by callers that persist
elsewhere (they read `load()` and write it out themselves).

Snapshots are deep-copied on the way in and out so callers can never
mutate stored state through a reference they hold.
"""

import datetime as dt
from typing import Optional

from parish_ledger.models.ledger import LedgerSnapshot, SnapshotRecord
from parish_ledger.services.storage.interface import (
    DuplicateError,
    LedgerStore,
    NotFoundError,
    SnapshotStore,
)


class InMemoryLedgerStore(LedgerStore):
    """Current ledger state in memory."""

    def __init__(self, initial: Optional[LedgerSnapshot] = None):
        self._snapshot = initial.model_copy(deep=True) if initial else None

    def load(self) -> LedgerSnapshot:
        if self._snapshot is None:
            return LedgerSnapshot.empty()
        return self._snapshot.model_copy(deep=True)

    def save(self, snapshot: LedgerSnapshot) -> None:
        self._snapshot = snapshot.model_copy(deep=True)

    def clear(self) -> None:
        self._snapshot = None


class InMemorySnapshotStore(SnapshotStore):
    """Snapshot history in memory, newest first."""

    def __init__(self):
        self._records: list[SnapshotRecord] = []

    def list_snapshots(self) -> list[SnapshotRecord]:
        return [r.model_copy(deep=True) for r in self._records]

    def append(self, record: SnapshotRecord) -> None:
        if any(r.timestamp == record.timestamp for r in self._records):
            raise DuplicateError(f"Snapshot {record.timestamp.isoformat()} already exists")
        self._records.append(record.model_copy(deep=True))
        self._records.sort(key=lambda r: r.timestamp, reverse=True)

    def get(self, timestamp: dt.datetime) -> Optional[SnapshotRecord]:
        for record in self._records:
            if record.timestamp == timestamp:
                return record.model_copy(deep=True)
        return None

    def delete(self, timestamp: dt.datetime) -> None:
        remaining = [r for r in self._records if r.timestamp != timestamp]
        if len(remaining) == len(self._records):
            raise NotFoundError(f"Snapshot {timestamp.isoformat()} not found")
        self._records = remaining

    def truncate(self, keep: int) -> int:
        removed = max(len(self._records) - keep, 0)
        del self._records[keep:]
        return removed

    def clear(self) -> None:
        self._records = []
