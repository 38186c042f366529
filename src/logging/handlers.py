# src/logging/handlers.py — v2
"""File handlers: rotating diagnostic log and append-only change log."""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

_SIZE_MULTIPLIERS = {"KB": 1024, "MB": 1024**2, "GB": 1024**3}


def _parse_size(size_str: str) -> int:
    """Parse size string like '10MB' into bytes.

    Supported suffixes: KB, MB, GB (case-insensitive).
    """
    match = re.match(r"^(\d+)\s*(KB|MB|GB)$", size_str.strip(), re.IGNORECASE)
    if not match:
        raise ValueError(f"Invalid size format: {size_str!r}. Use e.g. '10MB'.")
    return int(match.group(1)) * _SIZE_MULTIPLIERS[match.group(2).upper()]


def _prepare(log_file: str | Path) -> Path:
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_rotating_handler(
    log_file: str,
    rotation: str = "10MB",
    retention: int = 30,
) -> RotatingFileHandler:
    """Create a size-rotating handler for the diagnostic log.

    Args:
        log_file: Path to log file.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of backup files to keep.
    """
    return RotatingFileHandler(
        filename=str(_prepare(log_file)),
        maxBytes=_parse_size(rotation),
        backupCount=retention,
        encoding="utf-8",
    )


def create_append_handler(log_file: str | Path) -> logging.FileHandler:
    """Create an append-only handler for the operator change log.

    The change log is never rotated here; cron setups rotate it with
    logrotate alongside the rest of the host's logs.
    """
    handler = logging.FileHandler(str(_prepare(log_file)), mode="a", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(message)s", datefmt="%Y/%m/%d %H:%M:%S")
    )
    return handler
