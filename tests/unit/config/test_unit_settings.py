# tests/unit/config/test_unit_settings.py — v1
"""Tests for config/settings.py — typed Settings, JSON loading and validation."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from treesum.config.settings import (
    ConfigurationError,
    Settings,
    load_settings,
    read_config_file,
)


class TestSettingsDefaults:
    def test_defaults(self):
        s = Settings(_env_file=None, folders=["/srv/www"])
        assert s.ignored == []
        assert s.workers == 0
        assert s.checksum_algorithm == "sha1"
        assert s.chunk_size == 8192
        assert s.track_missing is True
        assert s.logfile is None
        assert s.slack_chat_id == ""

    def test_effective_workers(self):
        assert Settings(_env_file=None, folders=["/x"], workers=5).effective_workers == 5
        assert Settings(_env_file=None, folders=["/x"]).effective_workers == (os.cpu_count() or 1)

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("TREESUM_WORKERS", "7")
        monkeypatch.setenv("TREESUM_FOLDERS", '["/srv/a"]')
        s = Settings(_env_file=None)
        assert s.workers == 7
        assert s.folders == ["/srv/a"]

    def test_algorithm_lowercased(self):
        s = Settings(_env_file=None, folders=["/x"], checksum_algorithm="SHA256")
        assert s.checksum_algorithm == "sha256"


class TestSettingsValidation:
    def test_folders_required(self):
        with pytest.raises(ConfigurationError, match="folders"):
            Settings(_env_file=None)

    def test_slack_chat_without_token(self):
        with pytest.raises(ConfigurationError, match="slack_token"):
            Settings(_env_file=None, folders=["/x"], slack_chat_id="C123")

    def test_negative_workers(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, folders=["/x"], workers=-2)

    def test_zero_chunk_size(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, folders=["/x"], chunk_size=0)

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError, match="algorithm"):
            Settings(_env_file=None, folders=["/x"], checksum_algorithm="rot13")


class TestLoadSettings:
    def _write(self, tmp_path: Path, payload: object) -> Path:
        p = tmp_path / "config.json"
        p.write_text(json.dumps(payload), encoding="utf-8")
        return p

    def test_cron_config_format(self, tmp_path: Path):
        path = self._write(tmp_path, {
            "folders": ["/folder/a", "/folder/b"],
            "ignored": ["/folder/a/var", "/folder/b/var"],
            "logfile": "./changes.log",
            "storage": "/safeplace/checksums.json",
            "slack_chat_id": "C01",
            "slack_token": "xoxb-1",
        })
        s = load_settings(path)
        assert s.folders == ["/folder/a", "/folder/b"]
        assert s.ignored == ["/folder/a/var", "/folder/b/var"]
        assert s.storage == Path("/safeplace/checksums.json")
        assert s.logfile == Path("./changes.log")
        assert s.slack_chat_id == "C01"

    def test_overrides_win(self, tmp_path: Path):
        path = self._write(tmp_path, {"folders": ["/a"], "workers": 2})
        assert load_settings(path, workers=8).workers == 8

    def test_none_override_ignored(self, tmp_path: Path):
        path = self._write(tmp_path, {"folders": ["/a"], "workers": 2})
        assert load_settings(path, workers=None).workers == 2

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_settings(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path):
        p = tmp_path / "config.json"
        p.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_settings(p)

    def test_non_object(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="JSON object"):
            read_config_file(self._write(tmp_path, ["/a"]))

    def test_validation_error_wrapped(self, tmp_path: Path):
        path = self._write(tmp_path, {"folders": ["/a"], "workers": "many"})
        with pytest.raises(ConfigurationError):
            load_settings(path)

    def test_consistency_error_propagates(self, tmp_path: Path):
        path = self._write(tmp_path, {"folders": []})
        with pytest.raises(ConfigurationError, match="folders"):
            load_settings(path)
