# src/config/settings.py — v2
"""Typed configuration loaded from a JSON config file, .env and environment.

Precedence (highest first): explicit overrides, JSON config file,
TREESUM_* environment variables / .env, field defaults. The JSON keys
(folders, ignored, storage, logfile, slack_chat_id, slack_token) match
the config.json format cron deployments already use.
"""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is missing, unreadable or inconsistent."""


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TREESUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Scan ===
    folders: list[str] = []
    ignored: list[str] = []
    workers: int = 0
    queue_size: int = 1024
    checksum_algorithm: str = "sha1"
    chunk_size: int = 8192
    track_missing: bool = True

    # === Snapshot ===
    storage: Path = Path("checksums.json")

    # === Change log + notifications ===
    logfile: Path | None = None
    notify_title: str = "Integrity scan found modified/new files."
    slack_chat_id: str = ""
    slack_token: str = ""
    slack_api_url: str = "https://slack.com/api/chat.postMessage"
    slack_timeout: float = 10.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("workers", "queue_size")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("chunk_size must be > 0")
        return v

    @field_validator("checksum_algorithm")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        name = v.lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"unsupported checksum algorithm: {v!r}")
        return name

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not self.folders:
            errors.append("folders must list at least one directory to scan")

        if self.slack_chat_id and not self.slack_token:
            errors.append("slack_chat_id is set but slack_token is empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def effective_workers(self) -> int:
        """Worker count with 0 resolved to the processor count."""
        return self.workers or os.cpu_count() or 1

    @property
    def storage_path(self) -> Path:
        return self.storage.expanduser()


def read_config_file(config_path: Path) -> dict[str, Any]:
    """Read a JSON config document.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid JSON,
            or does not hold a JSON object.
    """
    try:
        raw = Path(config_path).expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config {config_path}: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in config {config_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Config {config_path} must contain a JSON object")
    return payload


def load_settings(config_path: Path | None = None, **overrides: object) -> Settings:
    """Load settings from a JSON config file with optional overrides.

    Args:
        config_path: JSON config file. None = environment and defaults only.
        **overrides: Field-level overrides (CLI flags, tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If the file is unusable or validation fails.
    """
    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(read_config_file(config_path))
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
