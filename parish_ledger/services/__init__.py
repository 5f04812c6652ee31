"""Services package."""

from parish_ledger.services.storage import (
    DuplicateError,
    InMemoryLedgerStore,
    InMemorySnapshotStore,
    LedgerStore,
    NotFoundError,
    SnapshotStore,
    StorageError,
)

__all__ = [
    # Storage services
    "DuplicateError",
    "InMemoryLedgerStore",
    "InMemorySnapshotStore",
    "LedgerStore",
    "NotFoundError",
    "SnapshotStore",
    "StorageError",
]
