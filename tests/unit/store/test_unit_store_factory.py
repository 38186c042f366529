# tests/unit/store/test_unit_store_factory.py — v1
"""Tests for store/store_factory.py."""

from __future__ import annotations

from treesum.store.json_store import JsonSnapshotStore
from treesum.store.store_factory import create_snapshot_store


class TestCreateSnapshotStore:
    def test_json_store_at_storage_path(self, make_settings, tmp_path):
        store = create_snapshot_store(make_settings(storage=tmp_path / "x" / "s.json"))
        assert isinstance(store, JsonSnapshotStore)
        assert store.path == tmp_path / "x" / "s.json"
