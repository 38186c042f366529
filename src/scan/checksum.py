# src/scan/checksum.py — v1
"""Checksum functions: chunked streaming digests over regular files.

A checksum function maps (path, size) to a hex digest. It reads the file in
fixed-size chunks, never past the size recorded at stat time, so memory use
stays bounded for arbitrarily large files. Read failures surface as OSError;
compute_result() turns them into the Err variant of ChecksumResult.
"""

from __future__ import annotations

import hashlib
import logging
import math
from typing import Protocol

from treesum.scan.models import ChecksumResult, FileDescriptor

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
DEFAULT_ALGORITHM = "sha1"


class ChecksumFunction(Protocol):
    """Callable producing a hex digest for a file of a known size."""

    def __call__(self, path: str, size: int) -> str: ...


def chunked_checksum(
    path: str,
    size: int,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = CHUNK_SIZE,
) -> str:
    """Hash the first ``size`` bytes of ``path`` in ``chunk_size`` reads.

    Args:
        path: File to read.
        size: Byte length recorded when the file was discovered.
        algorithm: Any hashlib algorithm name.
        chunk_size: Bytes per read.

    Returns:
        Hex digest. A zero-length file yields the empty-input digest.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    digest = hashlib.new(algorithm)
    blocks = math.ceil(size / chunk_size) if size > 0 else 0
    with open(path, "rb") as handle:
        for i in range(blocks):
            block_size = min(chunk_size, size - i * chunk_size)
            chunk = handle.read(block_size)
            if not chunk:
                # File shrank since stat; hash what was there.
                break
            digest.update(chunk)
    return digest.hexdigest()


def make_checksum(
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = CHUNK_SIZE,
) -> ChecksumFunction:
    """Bind algorithm and chunk size into a ChecksumFunction.

    Raises:
        ValueError: If the algorithm is unknown or chunk_size is not positive.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
    if algorithm not in hashlib.algorithms_available:
        raise ValueError(f"Unsupported checksum algorithm: {algorithm!r}")

    def _checksum(path: str, size: int) -> str:
        return chunked_checksum(path, size, algorithm=algorithm, chunk_size=chunk_size)

    _checksum.__name__ = f"{algorithm}_checksum"
    return _checksum


def compute_result(checksum: ChecksumFunction, descriptor: FileDescriptor) -> ChecksumResult:
    """Run ``checksum`` on one descriptor, mapping failures to an Err result."""
    try:
        digest = checksum(descriptor.real_path, descriptor.size)
    except OSError as exc:
        logger.debug("Read failed for %s: %s", descriptor.path, exc)
        return ChecksumResult.err(descriptor.path, exc.strerror or str(exc))
    except Exception as exc:
        logger.debug("Checksum function failed for %s", descriptor.path, exc_info=True)
        return ChecksumResult.err(descriptor.path, f"{type(exc).__name__}: {exc}")
    return ChecksumResult.ok(descriptor.path, digest)
