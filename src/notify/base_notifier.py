# src/notify/base_notifier.py — v1
"""Abstract notifier interface.

Notifiers deliver a non-empty ChangeReport somewhere an operator will see
it. Callers must not invoke them for an empty report.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from treesum.scan.models import ChangeReport


class NotificationError(Exception):
    """Raised when a notifier fails to deliver a report."""


class BaseNotifier(ABC):
    """Delivery channel for change reports."""

    @abstractmethod
    def notify(self, report: ChangeReport) -> None:
        """Deliver ``report``.

        Raises:
            NotificationError: If delivery failed.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short channel name for logs."""
