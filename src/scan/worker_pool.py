# src/scan/worker_pool.py — v1
"""Fixed-size pool of checksum worker threads.

Each worker pulls FileDescriptors from the work queue until it receives a
sentinel, checksums each descriptor and puts the ChecksumResult on the
result queue. hashlib releases the GIL while digesting, so threads give
real parallelism on the hashing hot path.
"""

from __future__ import annotations

import contextvars
import logging
import queue
import threading

from treesum.scan.checksum import ChecksumFunction, compute_result
from treesum.scan.models import ChecksumResult, FileDescriptor

logger = logging.getLogger(__name__)

# "No more work" marker. Exactly one is sent per worker.
SENTINEL = None


class WorkerPool:
    """N symmetric workers sharing one work queue and one result queue."""

    def __init__(
        self,
        size: int,
        checksum: ChecksumFunction,
        work_queue: queue.Queue[FileDescriptor | None],
        result_queue: queue.Queue[ChecksumResult | None],
    ) -> None:
        if size < 1:
            raise ValueError(f"Worker pool size must be >= 1, got {size}")
        self._size = size
        self._checksum = checksum
        self._work_queue = work_queue
        self._result_queue = result_queue
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._hashed = 0
        self._bytes = 0

    @property
    def size(self) -> int:
        return self._size

    @property
    def files_hashed(self) -> int:
        return self._hashed

    @property
    def bytes_hashed(self) -> int:
        return self._bytes

    def start(self) -> None:
        """Spawn all worker threads."""
        if self._threads:
            raise RuntimeError("Worker pool already started")
        for i in range(self._size):
            # Each thread runs in its own copy of the caller's log context.
            ctx = contextvars.copy_context()
            thread = threading.Thread(
                target=ctx.run,
                args=(self._run, i),
                name=f"ChecksumWorker-{i}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        logger.debug("Started %d checksum workers", self._size)

    def submit(self, descriptor: FileDescriptor) -> None:
        """Queue one descriptor; blocks while a bounded work queue is full."""
        self._work_queue.put(descriptor)

    def shutdown(self) -> None:
        """Send one sentinel per worker, then wait for every worker to exit.

        Must only be called once no further descriptors will be submitted.
        """
        for _ in self._threads:
            self._work_queue.put(SENTINEL)
        for thread in self._threads:
            thread.join()
        logger.debug(
            "All %d workers finished (%d files, %d bytes)",
            self._size, self._hashed, self._bytes,
        )

    def _run(self, worker_id: int) -> None:
        hashed = 0
        nbytes = 0
        while True:
            descriptor = self._work_queue.get()
            if descriptor is SENTINEL:
                break
            result = compute_result(self._checksum, descriptor)
            self._result_queue.put(result)
            hashed += 1
            nbytes += descriptor.size
        with self._lock:
            self._hashed += hashed
            self._bytes += nbytes
        logger.debug("Worker %d exiting after %d files", worker_id, hashed)
