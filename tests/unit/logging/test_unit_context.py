# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging/context.py."""

from __future__ import annotations

from treesum.logging.context import (
    LogContext,
    clear_context,
    get_context,
    set_root_context,
    set_scan_context,
)


class TestLogContext:
    def teardown_method(self):
        clear_context()

    def test_default_empty(self):
        clear_context()
        assert get_context().as_dict() == {}

    def test_scan_and_root(self):
        set_scan_context("s1")
        set_root_context("/srv/www")
        assert get_context().as_dict() == {"scan_id": "s1", "root": "/srv/www"}

    def test_new_scan_resets_root(self):
        set_scan_context("s1")
        set_root_context("/srv/www")
        set_scan_context("s2")
        assert get_context() == LogContext(scan_id="s2", root=None)
