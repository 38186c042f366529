# src/scan/walker.py — v1
"""Tree walker: enumerate regular files under one root.

Traversal is depth-first in filesystem order and never follows symlinks.
Only a configured root may itself be a symlink; it is resolved once by
resolve_root() and the walk runs against the target, while snapshot keys
and ignore matching keep using the configured path.
"""

from __future__ import annotations

import logging
import os
import stat
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from treesum.scan.models import FileDescriptor, ScanError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ScanRoot:
    """A configured root and the directory actually walked for it."""

    configured: str
    resolved: str

    @property
    def is_symlink(self) -> bool:
        return self.configured != self.resolved


def resolve_root(root: str) -> ScanRoot:
    """Resolve a configured root once, following it if it is a symlink.

    Raises:
        OSError: If the root cannot be stat'd.
    """
    configured = os.path.abspath(root)
    info = os.lstat(configured)
    if stat.S_ISLNK(info.st_mode):
        resolved = os.path.realpath(configured)
        # Surface dangling links as a stat failure of the target.
        os.stat(resolved)
        logger.debug("Root %s is a symlink to %s", configured, resolved)
        return ScanRoot(configured=configured, resolved=resolved)
    return ScanRoot(configured=configured, resolved=configured)


def normalize_ignored(ignored: Iterable[str]) -> frozenset[str]:
    """Normalize ignore entries for exact matching (drops trailing separators)."""
    return frozenset(os.path.normpath(p) for p in ignored if p)


class TreeWalker:
    """Walk roots and hand every regular file to ``emit``.

    Walk errors are appended to ``errors`` and never abort the walk.
    """

    def __init__(
        self,
        emit: Callable[[FileDescriptor], None],
        ignored: Iterable[str] = (),
        errors: list[ScanError] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._emit = emit
        self._ignored = normalize_ignored(ignored)
        self._errors = errors if errors is not None else []
        self._cancel = cancel_event or threading.Event()

    @property
    def errors(self) -> list[ScanError]:
        return self._errors

    def is_ignored(self, display_path: str, real_path: str) -> bool:
        """True when either path form exactly matches an ignore entry."""
        return display_path in self._ignored or real_path in self._ignored

    def walk(self, root: ScanRoot) -> int:
        """Walk one resolved root synchronously.

        Returns:
            Number of descriptors emitted.
        """
        if self.is_ignored(root.configured, root.resolved):
            logger.info("Root %s is ignored, skipping", root.configured)
            return 0

        emitted = 0
        stack: list[tuple[str, str]] = [(root.configured, root.resolved)]
        while stack:
            if self._cancel.is_set():
                logger.info("Walk of %s cancelled", root.configured)
                break
            display_dir, real_dir = stack.pop()
            try:
                with os.scandir(real_dir) as it:
                    entries = list(it)
            except OSError as exc:
                self._record(display_dir, exc)
                continue

            subdirs: list[tuple[str, str]] = []
            for entry in entries:
                display_path = os.path.join(display_dir, entry.name)
                if self.is_ignored(display_path, entry.path):
                    continue
                try:
                    info = entry.stat(follow_symlinks=False)
                except OSError as exc:
                    self._record(display_path, exc)
                    continue
                mode = info.st_mode
                if stat.S_ISLNK(mode):
                    continue
                if stat.S_ISDIR(mode):
                    subdirs.append((display_path, entry.path))
                    continue
                if not stat.S_ISREG(mode):
                    # FIFOs, sockets and devices: reading could block.
                    continue
                if self._cancel.is_set():
                    return emitted
                self._emit(
                    FileDescriptor(
                        path=display_path,
                        real_path=entry.path,
                        size=info.st_size,
                        mode=mode,
                        mod_time=info.st_mtime,
                    )
                )
                emitted += 1

            # Reverse so the first subdirectory is visited first.
            stack.extend(reversed(subdirs))

        return emitted

    def _record(self, path: str, exc: OSError) -> None:
        reason = exc.strerror or str(exc)
        logger.debug("Can't read %s: %s", path, reason)
        self._errors.append(ScanError(kind="walk", path=path, reason=reason))
