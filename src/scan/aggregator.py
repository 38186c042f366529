# src/scan/aggregator.py — v1
"""Aggregator: the single consumer that folds results into the new snapshot.

The aggregator thread is the only writer of the snapshot under construction
and of the change lists, so they need no lock. It stops only when it reads
the CLOSED marker, which the coordinator puts on the result queue after
every worker has been joined; results already queued ahead of the marker
are therefore always drained.
"""

from __future__ import annotations

import contextvars
import logging
import queue
import threading
from collections.abc import Mapping

from treesum.scan.models import ChecksumResult, ScanError

logger = logging.getLogger(__name__)

CLOSED = None


class Aggregator:
    """Compare each result with the prior snapshot and record it."""

    def __init__(
        self,
        prior: Mapping[str, str],
        result_queue: queue.Queue[ChecksumResult | None],
    ) -> None:
        self._prior = prior
        self._queue = result_queue
        self._snapshot: dict[str, str] = {}
        self._new_files: list[str] = []
        self._changed_files: list[str] = []
        self._errors: list[ScanError] = []
        self._thread: threading.Thread | None = None
        self._finalized = False

    def start(self) -> None:
        """Run the consumer loop on its own thread."""
        if self._thread is not None:
            raise RuntimeError("Aggregator already started")
        ctx = contextvars.copy_context()
        self._thread = threading.Thread(
            target=ctx.run, args=(self._run,), name="Aggregator", daemon=True,
        )
        self._thread.start()

    def add(self, result: ChecksumResult) -> None:
        """Merge one result. Called only from the consumer thread (or tests)."""
        value = result.snapshot_value
        previous = self._prior.get(result.file)
        if previous is None:
            self._new_files.append(result.file)
        elif previous != value or not result.is_ok:
            self._changed_files.append(result.file)
        if not result.is_ok:
            self._errors.append(
                ScanError(kind="read", path=result.file, reason=result.error or "")
            )
        self._snapshot[result.file] = value

    def finalize(self) -> tuple[dict[str, str], list[str], list[str], list[ScanError]]:
        """Signal the end of results, wait for the drain, return the state.

        Returns:
            (snapshot, new_files, changed_files, read_errors)
        """
        if self._thread is not None and not self._finalized:
            self._queue.put(CLOSED)
            self._thread.join()
        self._finalized = True
        logger.debug(
            "Aggregated %d entries (%d new, %d changed, %d read errors)",
            len(self._snapshot), len(self._new_files),
            len(self._changed_files), len(self._errors),
        )
        return self._snapshot, self._new_files, self._changed_files, self._errors

    def _run(self) -> None:
        while True:
            result = self._queue.get()
            if result is CLOSED:
                break
            self.add(result)
