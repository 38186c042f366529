# tests/conftest.py — v2
"""Shared test fixtures for unit and integration tests.

Provides small on-disk trees, snapshot helpers and a deterministic digest.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from treesum.config.settings import Settings


def sha1_hex(data: bytes) -> str:
    """Reference digest: SHA-1 of the whole content in one pass."""
    return hashlib.sha1(data).hexdigest()


def write_tree(root: Path, files: dict[str, bytes]) -> dict[str, Path]:
    """Create ``files`` (relative path -> content) under ``root``."""
    created = {}
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)
        created[rel] = p
    return created


# === FIXTURES: filesystem ===


@pytest.fixture
def site_tree(tmp_path: Path) -> Path:
    """Small document root with nested directories and a cache dir."""
    root = tmp_path / "site"
    write_tree(
        root,
        {
            "index.php": b"<?php echo 'hi';",
            "wp-config.php": b"define('DB', 'x');",
            "css/main.css": b"body { color: red }",
            "js/app.js": b"console.log(1)",
            "var/cache/page.html": b"<html>cached</html>",
            "uploads/2024/photo.jpg": b"\xff\xd8\xff fake jpeg",
            "empty.txt": b"",
        },
    )
    return root


@pytest.fixture
def make_settings(tmp_path: Path):
    """Factory for Settings bound to tmp_path, without reading .env."""

    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {
            "folders": [str(tmp_path / "site")],
            "storage": tmp_path / "checksums.json",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def write_files():
    """Expose write_tree() to test modules (conftest is not importable)."""
    return write_tree
