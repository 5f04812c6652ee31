"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for ledger
state and snapshot history. Persistent backends live outside this package
and implement the same interfaces.
"""

from parish_ledger.services.storage.interface import (
    DuplicateError,
    LedgerStore,
    NotFoundError,
    SnapshotStore,
    StorageError,
)
from parish_ledger.services.storage.memory import (
    InMemoryLedgerStore,
    InMemorySnapshotStore,
)

__all__ = [
    # Interfaces
    "LedgerStore",
    "SnapshotStore",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryLedgerStore",
    "InMemorySnapshotStore",
]
