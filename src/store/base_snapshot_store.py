# src/store/base_snapshot_store.py — v1
"""Abstract snapshot store interface.

A snapshot is a flat mapping of file path to checksum. The scan engine
receives the prior snapshot and returns the new one; stores only persist.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping


class PersistenceError(Exception):
    """Raised when a new snapshot cannot be written."""


class BaseSnapshotStore(ABC):
    """Unified interface for snapshot persistence backends."""

    @abstractmethod
    def load(self) -> dict[str, str]:
        """Return the prior snapshot, or an empty mapping on first run.

        Raises:
            ConfigurationError: If a snapshot exists but cannot be used.
        """

    @abstractmethod
    def save(self, snapshot: Mapping[str, str]) -> None:
        """Persist the new snapshot.

        Raises:
            PersistenceError: If the snapshot cannot be written.
        """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the snapshot (for logs)."""
