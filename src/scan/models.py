# src/scan/models.py — v1
"""Scan domain models: FileDescriptor, ChecksumResult, ScanError, reports.

FileDescriptor and ChecksumResult travel through the worker queues, so they
are slotted frozen dataclasses. Reports leave the engine and are pydantic
models, serializable for notifiers and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

# Prefix of the snapshot value stored for a file that could not be read.
# A hex digest never contains ':', so the value never matches a real checksum.
READ_ERROR_PREFIX = "error:"


@dataclass(slots=True, frozen=True)
class FileDescriptor:
    """One regular file discovered by the walker."""

    path: str  # snapshot key (under the configured root)
    real_path: str  # path actually opened (under the resolved root)
    size: int
    mode: int
    mod_time: float


@dataclass(slots=True, frozen=True)
class ChecksumResult:
    """Tagged outcome of checksumming one descriptor: Ok(digest) | Err(reason)."""

    file: str
    digest: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, file: str, digest: str) -> ChecksumResult:
        return cls(file=file, digest=digest)

    @classmethod
    def err(cls, file: str, reason: str) -> ChecksumResult:
        return cls(file=file, error=reason)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def snapshot_value(self) -> str:
        """Value written to the snapshot for this path."""
        if self.is_ok:
            return self.digest or ""
        return f"{READ_ERROR_PREFIX}{self.error}"


class ScanError(BaseModel):
    """A single non-fatal ErrorLog entry."""

    kind: Literal["walk", "read"]
    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class ScanStats(BaseModel):
    """Counters collected during one scan."""

    roots_scanned: int = 0
    files_queued: int = 0
    files_hashed: int = 0
    bytes_hashed: int = 0
    workers: int = 0
    duration_seconds: float = 0.0


class ChangeReport(BaseModel):
    """Structured change report handed to notifiers."""

    new_files: list[str] = Field(default_factory=list)
    changed_files: list[str] = Field(default_factory=list)
    missing_files: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    complete: bool = True

    @property
    def is_empty(self) -> bool:
        return self.complete and not (
            self.new_files or self.changed_files or self.missing_files or self.errors
        )


class ScanReport(BaseModel):
    """Final output of a scan: the new snapshot plus everything observed."""

    scan_id: str
    snapshot: dict[str, str] = Field(default_factory=dict)
    new_files: list[str] = Field(default_factory=list)
    changed_files: list[str] = Field(default_factory=list)
    missing_files: list[str] = Field(default_factory=list)
    errors: list[ScanError] = Field(default_factory=list)
    complete: bool = True
    stats: ScanStats = Field(default_factory=ScanStats)

    def change_report(self) -> ChangeReport:
        """Project this report onto the notifier-facing ChangeReport."""
        return ChangeReport(
            new_files=list(self.new_files),
            changed_files=list(self.changed_files),
            missing_files=list(self.missing_files),
            errors=[str(e) for e in self.errors],
            complete=self.complete,
        )

    @property
    def has_changes(self) -> bool:
        return bool(self.new_files or self.changed_files or self.missing_files)
