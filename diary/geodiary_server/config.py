"""
Configuration management for the GeoDiary entry store.

All configuration is done via environment variables - no config files.
This module provides typed configuration classes with validation.

Invariants:
    - All settings have sensible defaults for local development
    - Capacity limits are positive integers
    - Secrets are never logged or exposed in error messages

How to change safely:
    - Add new settings with defaults that maintain backward compatibility
    - Lowering a limit does not shrink lists that already exceed it;
      only new appends are rejected
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class LogFormat(Enum):
    """Supported log output formats."""

    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class StorageConfig:
    """Local SQLite storage configuration.

    Attributes:
        data_dir: Directory holding the entry database
        db_filename: Database file name inside data_dir
        wal_mode: SQLite WAL journal mode enabled
        busy_timeout_ms: SQLite busy timeout in milliseconds
        cache_size_pages: SQLite cache size in pages (negative = KB)
    """

    data_dir: str = "/var/lib/geodiary"
    db_filename: str = "entries.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000
    cache_size_pages: int = -64000  # 64MB

    @property
    def db_path(self) -> Path:
        return Path(self.data_dir) / self.db_filename

    @classmethod
    def from_env(cls) -> StorageConfig:
        """Load configuration from environment variables."""
        return cls(
            data_dir=os.getenv("DATA_DIR", "/var/lib/geodiary"),
            db_filename=os.getenv("DB_FILENAME", "entries.db"),
            wal_mode=os.getenv("SQLITE_WAL_MODE", "true").lower() == "true",
            busy_timeout_ms=int(os.getenv("SQLITE_BUSY_TIMEOUT_MS", "5000")),
            cache_size_pages=int(os.getenv("SQLITE_CACHE_SIZE", "-64000")),
        )


@dataclass(frozen=True)
class LimitsConfig:
    """Field and collection bounds.

    Attributes:
        max_title_length: Maximum title length in code points
        max_description_length: Maximum description length in code points
        max_audio_url_length: Maximum audio URL length in code points
        max_entries_per_user: Capacity of a user's entry index
        max_grants_per_entry: Capacity of an entry's access list
    """

    max_title_length: int = 100
    max_description_length: int = 500
    max_audio_url_length: int = 256
    max_entries_per_user: int = 100
    max_grants_per_entry: int = 50

    @classmethod
    def from_env(cls) -> LimitsConfig:
        """Load configuration from environment variables."""
        return cls(
            max_title_length=int(os.getenv("MAX_TITLE_LENGTH", "100")),
            max_description_length=int(os.getenv("MAX_DESCRIPTION_LENGTH", "500")),
            max_audio_url_length=int(os.getenv("MAX_AUDIO_URL_LENGTH", "256")),
            max_entries_per_user=int(os.getenv("MAX_ENTRIES_PER_USER", "100")),
            max_grants_per_entry=int(os.getenv("MAX_GRANTS_PER_ENTRY", "50")),
        )


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format (json, text)
    """

    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(cls) -> ObservabilityConfig:
        """Load configuration from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "json").lower(),
        )


@dataclass
class StoreConfig:
    """Complete store configuration.

    Attributes:
        storage: Local storage configuration
        limits: Field and collection bounds
        observability: Logging configuration
    """

    storage: StorageConfig = field(default_factory=StorageConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Load complete configuration from environment variables.

        Returns:
            StoreConfig with all sections populated from environment.

        Raises:
            ValueError: If configuration is missing or invalid.
        """
        config = cls(
            storage=StorageConfig.from_env(),
            limits=LimitsConfig.from_env(),
            observability=ObservabilityConfig.from_env(),
        )

        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises:
            ValueError: If configuration is invalid.
        """
        if not self.storage.data_dir:
            raise ValueError("DATA_DIR must not be empty")
        if not self.storage.db_filename:
            raise ValueError("DB_FILENAME must not be empty")

        for name, value in (
            ("MAX_TITLE_LENGTH", self.limits.max_title_length),
            ("MAX_DESCRIPTION_LENGTH", self.limits.max_description_length),
            ("MAX_AUDIO_URL_LENGTH", self.limits.max_audio_url_length),
            ("MAX_ENTRIES_PER_USER", self.limits.max_entries_per_user),
            ("MAX_GRANTS_PER_ENTRY", self.limits.max_grants_per_entry),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        try:
            LogFormat(self.observability.log_format)
        except ValueError:
            raise ValueError(
                f"Invalid LOG_FORMAT '{self.observability.log_format}'. Must be one of: json, text"
            )

        if not isinstance(logging.getLevelName(self.observability.log_level.upper()), int):
            raise ValueError(f"Invalid LOG_LEVEL '{self.observability.log_level}'")

        if not os.path.exists(self.storage.data_dir):
            logger.warning(
                f"Data directory does not exist: {self.storage.data_dir}. "
                "It will be created on first write."
            )

    def log_config(self) -> None:
        """Log configuration summary."""
        logger.info(
            "Store configuration loaded",
            extra={
                "data_dir": self.storage.data_dir,
                "db_filename": self.storage.db_filename,
                "wal_mode": self.storage.wal_mode,
                "max_entries_per_user": self.limits.max_entries_per_user,
                "max_grants_per_entry": self.limits.max_grants_per_entry,
                "log_level": self.observability.log_level,
            },
        )
