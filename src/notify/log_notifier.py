# src/notify/log_notifier.py — v1
"""Change log notifier: append report lines to the operator's log file."""

from __future__ import annotations

import logging
from pathlib import Path

from treesum.logging.handlers import create_append_handler
from treesum.notify.base_notifier import BaseNotifier, NotificationError
from treesum.notify.message import format_lines
from treesum.scan.models import ChangeReport

CHANGE_LOGGER = "treesum.changes"


class LogFileNotifier(BaseNotifier):
    """Append one timestamped line per report section to a file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def name(self) -> str:
        return "logfile"

    @property
    def path(self) -> Path:
        return self._path

    def notify(self, report: ChangeReport) -> None:
        try:
            handler = create_append_handler(self._path)
        except OSError as exc:
            raise NotificationError(f"Cannot open change log {self._path}: {exc}") from exc

        change_logger = logging.getLogger(CHANGE_LOGGER)
        change_logger.setLevel(logging.INFO)
        # Keep change lines out of the diagnostic stream.
        change_logger.propagate = False
        change_logger.addHandler(handler)
        try:
            for line in format_lines(report):
                change_logger.info(line)
        finally:
            change_logger.removeHandler(handler)
            handler.close()
