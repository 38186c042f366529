# tests/unit/logging/test_unit_handlers.py — v2
"""Tests for logging/handlers.py — rotating and append handlers."""

from __future__ import annotations

import logging

import pytest

from treesum.logging.handlers import _parse_size, create_append_handler, create_rotating_handler


class TestParseSize:
    def test_mb(self):
        assert _parse_size("10MB") == 10 * 1024 * 1024

    def test_kb(self):
        assert _parse_size("512KB") == 512 * 1024

    def test_gb(self):
        assert _parse_size("1GB") == 1024 * 1024 * 1024

    def test_case_insensitive(self):
        assert _parse_size("10mb") == 10 * 1024 * 1024

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="Invalid size"):
            _parse_size("10bytes")


class TestCreateRotatingHandler:
    def test_creates_handler(self, tmp_path):
        handler = create_rotating_handler(str(tmp_path / "t.log"), rotation="1MB", retention=5)
        try:
            assert handler.maxBytes == 1024 * 1024
            assert handler.backupCount == 5
        finally:
            handler.close()

    def test_creates_parent_dirs(self, tmp_path):
        handler = create_rotating_handler(str(tmp_path / "subdir" / "deep" / "t.log"))
        handler.close()
        assert (tmp_path / "subdir" / "deep").exists()


class TestCreateAppendHandler:
    def test_appends(self, tmp_path):
        log_file = tmp_path / "changes.log"
        log_file.write_text("existing line\n", encoding="utf-8")
        handler = create_append_handler(log_file)
        record = logging.LogRecord(
            name="t", level=logging.INFO, pathname="", lineno=0,
            msg="New files/folders: [a]", args=(), exc_info=None,
        )
        handler.emit(record)
        handler.close()
        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "existing line"
        assert lines[1].endswith("New files/folders: [a]")
