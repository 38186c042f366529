# src/store/json_store.py — v1
"""JSON file snapshot store (default).

The snapshot is one flat JSON object, keys sorted and indented so two
snapshots can be compared with diff. Writes go to a temporary file in the
same directory and are moved into place with os.replace().
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from treesum.config.settings import ConfigurationError
from treesum.store.base_snapshot_store import BaseSnapshotStore, PersistenceError

logger = logging.getLogger(__name__)


class JsonSnapshotStore(BaseSnapshotStore):
    """Snapshot persisted as a single JSON document."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def load(self) -> dict[str, str]:
        """Read the snapshot; a missing file is an empty snapshot."""
        if not self._path.exists():
            logger.info("No snapshot at %s, starting from empty state", self._path)
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read snapshot {self._path}: {e}") from e

        # An empty file or "null" is what an interrupted first run leaves behind.
        if data is None:
            return {}
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise ConfigurationError(
                f"Snapshot {self._path} must be a JSON object of path -> checksum"
            )
        logger.debug("Loaded %d snapshot entries from %s", len(data), self._path)
        return data

    def save(self, snapshot: Mapping[str, str]) -> None:
        """Atomically replace the snapshot file."""
        payload = json.dumps(dict(snapshot), indent=2, sort_keys=True)
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            raise PersistenceError(f"Cannot write snapshot {self._path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.info("Wrote %d snapshot entries to %s", len(snapshot), self._path)
