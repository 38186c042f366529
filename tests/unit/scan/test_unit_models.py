# tests/unit/scan/test_unit_models.py — v1
"""Tests for scan/models.py."""

from __future__ import annotations

import dataclasses

import pytest

from treesum.scan.models import (
    READ_ERROR_PREFIX,
    ChangeReport,
    ChecksumResult,
    FileDescriptor,
    ScanError,
    ScanReport,
)


class TestFileDescriptor:
    def test_immutable(self):
        d = FileDescriptor(path="/a", real_path="/a", size=1, mode=0o100644, mod_time=0.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            d.size = 2  # type: ignore[misc]


class TestChecksumResult:
    def test_ok_variant(self):
        r = ChecksumResult.ok("/a", "abc")
        assert r.is_ok
        assert r.snapshot_value == "abc"

    def test_err_variant(self):
        r = ChecksumResult.err("/a", "No such file or directory")
        assert not r.is_ok
        assert r.digest is None
        assert r.snapshot_value == f"{READ_ERROR_PREFIX}No such file or directory"

    def test_err_value_never_looks_like_hex_digest(self):
        value = ChecksumResult.err("/a", "x").snapshot_value
        assert not all(c in "0123456789abcdef" for c in value)


class TestChangeReport:
    def test_empty(self):
        assert ChangeReport().is_empty

    @pytest.mark.parametrize("field", ["new_files", "changed_files", "missing_files", "errors"])
    def test_non_empty(self, field: str):
        assert not ChangeReport(**{field: ["x"]}).is_empty

    def test_incomplete_is_not_empty(self):
        assert not ChangeReport(complete=False).is_empty


class TestScanReport:
    def test_change_report_projection(self):
        report = ScanReport(
            scan_id="s1",
            snapshot={"a": "1", "b": "2"},
            new_files=["b"],
            changed_files=["a"],
            errors=[ScanError(kind="walk", path="/x", reason="Permission denied")],
        )
        change = report.change_report()
        assert change.new_files == ["b"]
        assert change.changed_files == ["a"]
        assert change.errors == ["/x: Permission denied"]
        assert change.complete is True
        assert report.has_changes

    def test_serializable(self):
        report = ScanReport(scan_id="s1", snapshot={"a": "1"})
        data = report.model_dump()
        assert data["snapshot"] == {"a": "1"}
        assert data["stats"]["files_hashed"] == 0
