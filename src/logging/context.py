# src/logging/context.py — v2
"""Contextual logging support: attach scan_id and root to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set once per scan by the engine, and per root while that root is walked.
_scan_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_id", default=None
)
_root: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "root", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    scan_id: str | None = None
    root: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(scan_id=_scan_id.get(), root=_root.get())


def set_scan_context(scan_id: str) -> None:
    """Set scan-level context (called once per scan)."""
    _scan_id.set(scan_id)
    _root.set(None)


def set_root_context(root: str | None) -> None:
    """Set the root currently being walked."""
    _root.set(root)


def clear_context() -> None:
    """Reset all context variables."""
    _scan_id.set(None)
    _root.set(None)
