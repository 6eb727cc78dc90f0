"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_float_env
from .errors import ConfigurationError
from .logging import configure_logging
from .restore import CapabilityConfig, RestoreConfig, get_restore_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CapabilityConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "RestoreConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_restore_config",
    "get_storage_config",
    "optional_float_env",
]
