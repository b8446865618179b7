"""
GeoDiary store bootstrap.

Builds a ready-to-use EntryStore for an embedding front end:
- Loads configuration from the environment
- Configures root logging (JSON or text)
- Creates the database schema if needed

Usage:
    >>> store = await open_store()
    >>> session = EntrySession(store, authenticated_identity)

Configuration is entirely via environment variables.
See config.py for all available settings.
"""

from __future__ import annotations

import logging

import json_log_formatter

from .config import LogFormat, StoreConfig
from .store.entry_store import EntryStore

logger = logging.getLogger(__name__)


def setup_logging(config: StoreConfig) -> None:
    """Configure logging based on configuration.

    Args:
        config: Store configuration
    """
    level = getattr(logging, config.observability.log_level.upper(), logging.INFO)

    if config.observability.log_format == LogFormat.JSON.value:
        formatter: logging.Formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


async def open_store(config: StoreConfig | None = None) -> EntryStore:
    """Create and initialize an entry store.

    Args:
        config: Optional store configuration (loaded from env if not provided)

    Returns:
        Initialized EntryStore
    """
    config = config or StoreConfig.from_env()
    setup_logging(config)
    config.log_config()

    store = EntryStore.from_config(config)
    await store.initialize()
    return store
