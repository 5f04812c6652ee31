"""
Abstract Storage Interface

DESIGN DECISION: The ledger never talks to a storage backend directly.
Callers inject a store, which allows us to:
1. Keep browser, file or database persistence outside the engine
2. Use in-memory storage for testing
3. Swap backends without touching business logic

A store holds whole snapshots. There are no partial updates: the service
builds a complete new LedgerSnapshot and saves it in one call.
"""

import datetime as dt
from abc import ABC, abstractmethod
from typing import Optional

from parish_ledger.models.ledger import LedgerSnapshot, SnapshotRecord


class LedgerStore(ABC):
    """
    Abstract interface for the current ledger state.

    Any storage implementation (key-value store, file, database)
    must implement these methods.
    """

    @abstractmethod
    def load(self) -> LedgerSnapshot:
        """
        Return the current state.

        Returns:
            The stored snapshot, or an empty ledger if nothing is stored

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save(self, snapshot: LedgerSnapshot) -> None:
        """
        Replace the current state.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all stored state."""
        pass


class SnapshotStore(ABC):
    """
    Abstract interface for the saved-snapshot history.

    Records are identified by their timestamp.
    """

    @abstractmethod
    def list_snapshots(self) -> list[SnapshotRecord]:
        """
        All saved snapshots.

        Returns:
            Records, newest first
        """
        pass

    @abstractmethod
    def append(self, record: SnapshotRecord) -> None:
        """
        Add a record to the history.

        Raises:
            DuplicateError: If a record with the same timestamp exists
        """
        pass

    @abstractmethod
    def get(self, timestamp: dt.datetime) -> Optional[SnapshotRecord]:
        """
        Retrieve a record by timestamp.

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    def delete(self, timestamp: dt.datetime) -> None:
        """
        Delete a record by timestamp.

        Raises:
            NotFoundError: If no record has that timestamp
        """
        pass

    @abstractmethod
    def truncate(self, keep: int) -> int:
        """
        Drop the oldest records beyond `keep`.

        Returns:
            Number of records removed
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every record."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
