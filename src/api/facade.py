# src/api/facade.py — v2
"""Public API facade: one full integrity run.

Usage:
    from treesum.api.facade import run_scan
    report = run_scan(load_settings(Path("config.json")))
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from treesum.config.settings import Settings
from treesum.notify.base_notifier import NotificationError
from treesum.scan.checksum import make_checksum
from treesum.scan.engine import ScanEngine
from treesum.scan.models import ChangeReport, ScanReport

if TYPE_CHECKING:
    from treesum.notify.base_notifier import BaseNotifier
    from treesum.scan.checksum import ChecksumFunction
    from treesum.store.base_snapshot_store import BaseSnapshotStore

logger = logging.getLogger(__name__)


def run_scan(
    settings: Settings,
    store: BaseSnapshotStore | None = None,
    notifiers: list[BaseNotifier] | None = None,
    cancel_event: threading.Event | None = None,
    checksum: ChecksumFunction | None = None,
    dry_run: bool = False,
) -> ScanReport:
    """Scan configured folders, persist the new snapshot and notify.

    Steps:
      1. Load the prior snapshot from the store
      2. Scan every configured folder and diff against it
      3. Persist the new snapshot (complete scans only, skipped on dry run)
      4. Hand a non-empty change report to every notifier

    Args:
        settings: Validated settings.
        store: Snapshot store. Built from settings if None.
        notifiers: Delivery channels. Built from settings if None.
        cancel_event: Set to stop the walk early; the report is then partial.
        checksum: Digest function. Built from settings if None.
        dry_run: Scan and report without writing the snapshot.

    Returns:
        The ScanReport of this run.

    Raises:
        ConfigurationError: If the prior snapshot cannot be read.
        PersistenceError: If the new snapshot cannot be written.
    """
    if store is None:
        from treesum.store.store_factory import create_snapshot_store
        store = create_snapshot_store(settings)
    if notifiers is None:
        from treesum.notify.notifier_factory import create_notifiers
        notifiers = create_notifiers(settings)

    prior = store.load()

    engine = ScanEngine(
        checksum=checksum or make_checksum(settings.checksum_algorithm, settings.chunk_size),
        workers=settings.effective_workers,
        ignored=settings.ignored,
        queue_size=settings.queue_size,
        track_missing=settings.track_missing,
    )
    report = engine.run(settings.folders, prior=prior, cancel_event=cancel_event)

    if not report.complete:
        logger.warning("Partial scan: snapshot %s left unchanged", store.location)
    elif dry_run:
        logger.info("Dry run: snapshot %s left unchanged", store.location)
    else:
        store.save(report.snapshot)

    dispatch(report.change_report(), notifiers)
    return report


def dispatch(report: ChangeReport, notifiers: list[BaseNotifier]) -> int:
    """Deliver ``report`` to every notifier; an empty report is never sent.

    A failing notifier is logged and does not stop the others.

    Returns:
        Number of notifiers that delivered successfully.
    """
    if report.is_empty:
        logger.info("No changes detected")
        return 0

    delivered = 0
    for notifier in notifiers:
        try:
            notifier.notify(report)
            delivered += 1
        except NotificationError as exc:
            logger.error("Notifier %s failed: %s", notifier.name, exc)
    return delivered
