# src/store/store_factory.py — v1
"""Factory for snapshot store instantiation."""

from __future__ import annotations

from treesum.config.settings import Settings
from treesum.store.base_snapshot_store import BaseSnapshotStore


def create_snapshot_store(settings: Settings) -> BaseSnapshotStore:
    """Instantiate the snapshot store for the configured storage path."""
    from treesum.store.json_store import JsonSnapshotStore

    return JsonSnapshotStore(settings.storage_path)
