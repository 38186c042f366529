# src/scan/engine.py — v1
"""Scan engine: walk roots, checksum in parallel, diff against the prior snapshot.

Pipeline:
    TreeWalker -> work queue -> WorkerPool -> result queue -> Aggregator

Shutdown order is fixed: every root is walked, then one sentinel per worker
is sent and all workers are joined, then the aggregator is closed and
joined. Only after that is the report assembled.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
import uuid
from collections.abc import Iterable, Mapping, Sequence

from treesum.logging.context import set_root_context, set_scan_context
from treesum.scan.aggregator import Aggregator
from treesum.scan.checksum import CHUNK_SIZE, DEFAULT_ALGORITHM, ChecksumFunction, make_checksum
from treesum.scan.models import ChecksumResult, FileDescriptor, ScanError, ScanReport, ScanStats
from treesum.scan.walker import ScanRoot, TreeWalker, normalize_ignored, resolve_root
from treesum.scan.worker_pool import WorkerPool

logger = logging.getLogger(__name__)


def default_workers() -> int:
    """Processor count, or 1 when it cannot be determined."""
    return os.cpu_count() or 1


class ScanEngine:
    """Concurrent scan-and-diff over one or more roots."""

    def __init__(
        self,
        checksum: ChecksumFunction | None = None,
        workers: int = 0,
        ignored: Iterable[str] = (),
        queue_size: int = 1024,
        track_missing: bool = True,
    ) -> None:
        """Initialize the engine.

        Args:
            checksum: Digest function; defaults to chunked SHA-1.
            workers: Pool size; 0 means one per processor.
            ignored: Exact-match ignore entries.
            queue_size: Bound of the work and result queues (0 = unbounded).
            track_missing: Report prior paths that a complete scan did not revisit.
        """
        if workers < 0:
            raise ValueError(f"workers must be >= 0, got {workers}")
        if queue_size < 0:
            raise ValueError(f"queue_size must be >= 0, got {queue_size}")
        self._checksum = checksum or make_checksum(DEFAULT_ALGORITHM, CHUNK_SIZE)
        self._workers = workers or default_workers()
        self._ignored = normalize_ignored(ignored)
        self._queue_size = queue_size
        self._track_missing = track_missing

    @property
    def workers(self) -> int:
        return self._workers

    def run(
        self,
        roots: Sequence[str],
        prior: Mapping[str, str] | None = None,
        cancel_event: threading.Event | None = None,
        scan_id: str | None = None,
    ) -> ScanReport:
        """Scan ``roots`` and diff the result against ``prior``.

        The prior snapshot is only read. If ``cancel_event`` is set during the
        walk, no further descriptors are queued, in-flight work is drained and
        the returned report has ``complete=False``.
        """
        t0 = time.perf_counter()
        prior = prior or {}
        cancel = cancel_event or threading.Event()
        scan_id = scan_id or uuid.uuid4().hex[:12]
        set_scan_context(scan_id)

        work_queue: queue.Queue[FileDescriptor | None] = queue.Queue(maxsize=self._queue_size)
        result_queue: queue.Queue[ChecksumResult | None] = queue.Queue(maxsize=self._queue_size)
        pool = WorkerPool(self._workers, self._checksum, work_queue, result_queue)
        aggregator = Aggregator(prior, result_queue)

        walk_errors: list[ScanError] = []
        walker = TreeWalker(
            emit=pool.submit,
            ignored=self._ignored,
            errors=walk_errors,
            cancel_event=cancel,
        )
        scanned: list[ScanRoot] = []
        queued = 0

        logger.info(
            "Scan %s started: %d root(s), %d worker(s), %d prior entries",
            scan_id, len(roots), self._workers, len(prior),
        )
        aggregator.start()
        pool.start()
        try:
            for configured in roots:
                if cancel.is_set():
                    break
                try:
                    root = resolve_root(configured)
                except OSError as exc:
                    reason = exc.strerror or str(exc)
                    logger.warning("Cannot scan root %s: %s", configured, reason)
                    walk_errors.append(ScanError(kind="walk", path=configured, reason=reason))
                    continue
                set_root_context(root.configured)
                if root.is_symlink:
                    logger.info("Walking %s (-> %s)", root.configured, root.resolved)
                else:
                    logger.info("Walking %s", root.configured)
                queued += walker.walk(root)
                scanned.append(root)
        finally:
            set_root_context(None)
            pool.shutdown()
            snapshot, new_files, changed_files, read_errors = aggregator.finalize()

        carried = self._carry_forward(prior, snapshot, walk_errors)
        if carried:
            logger.info(
                "Kept %d prior entries under unreadable paths", carried,
            )

        complete = not cancel.is_set()
        missing: list[str] = []
        if complete and self._track_missing:
            missing = self._missing_paths(prior, snapshot, scanned)

        stats = ScanStats(
            roots_scanned=len(scanned),
            files_queued=queued,
            files_hashed=pool.files_hashed,
            bytes_hashed=pool.bytes_hashed,
            workers=self._workers,
            duration_seconds=round(time.perf_counter() - t0, 3),
        )
        report = ScanReport(
            scan_id=scan_id,
            snapshot=snapshot,
            new_files=new_files,
            changed_files=changed_files,
            missing_files=missing,
            errors=walk_errors + read_errors,
            complete=complete,
            stats=stats,
        )
        if not complete:
            logger.warning("Scan %s cancelled; report is partial", scan_id)
        logger.info(
            "Scan %s finished in %.2fs: %d files, %d new, %d changed, %d missing, %d errors",
            scan_id, stats.duration_seconds, len(snapshot), len(new_files),
            len(changed_files), len(missing), len(report.errors),
        )
        return report

    def _missing_paths(
        self,
        prior: Mapping[str, str],
        snapshot: Mapping[str, str],
        scanned: Sequence[ScanRoot],
    ) -> list[str]:
        """Prior paths under a scanned root that were not revisited."""
        prefixes = tuple(
            root.configured.rstrip(os.sep) + os.sep for root in scanned
        )
        missing = []
        for path in prior:
            if path in snapshot or not path.startswith(prefixes):
                continue
            if self._has_ignored_ancestor(path):
                continue
            missing.append(path)
        return sorted(missing)

    def _carry_forward(
        self,
        prior: Mapping[str, str],
        snapshot: dict[str, str],
        walk_errors: Sequence[ScanError],
    ) -> int:
        """Copy prior entries at or under a path that could not be walked.

        Their state is unknown, so the previous checksum stays the baseline
        instead of the file being reported missing and then new.
        """
        failed = {os.path.abspath(e.path) for e in walk_errors}
        if not failed:
            return 0
        prefixes = tuple(p.rstrip(os.sep) + os.sep for p in failed)
        carried = 0
        for path, value in prior.items():
            if path in snapshot:
                continue
            if path not in failed and not path.startswith(prefixes):
                continue
            if self._has_ignored_ancestor(path):
                continue
            snapshot[path] = value
            carried += 1
        return carried

    def _has_ignored_ancestor(self, path: str) -> bool:
        current = path
        while True:
            if current in self._ignored:
                return True
            parent = os.path.dirname(current)
            if parent == current:
                return False
            current = parent
