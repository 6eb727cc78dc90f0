"""Restore run defaults and limits."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .env import optional_float_env

DEFAULT_CAPABILITY_CATEGORY = "email"
DEFAULT_CAPABILITY_REQUIRED_KEYS = ("smtpHost", "smtpUser", "smtpPass")
DEFAULT_FROM_NAME_KEY = "emailFromName"


@dataclass(frozen=True, slots=True)
class CapabilityConfig:
    """Which settings describe the outbound email capability."""

    category: str = DEFAULT_CAPABILITY_CATEGORY
    host_key: str = DEFAULT_CAPABILITY_REQUIRED_KEYS[0]
    user_key: str = DEFAULT_CAPABILITY_REQUIRED_KEYS[1]
    password_key: str = DEFAULT_CAPABILITY_REQUIRED_KEYS[2]
    from_name_key: str = DEFAULT_FROM_NAME_KEY

    @property
    def required_keys(self) -> tuple[str, str, str]:
        return (self.host_key, self.user_key, self.password_key)


@dataclass(frozen=True, slots=True)
class RestoreConfig:
    max_snapshot_bytes: int = 0
    capability: CapabilityConfig = field(default_factory=CapabilityConfig)


def get_restore_config() -> RestoreConfig:
    max_mb = optional_float_env("SNAPRESTORE_MAX_SNAPSHOT_MB", 0.0)
    category = os.getenv("SNAPRESTORE_CAPABILITY_CATEGORY") or DEFAULT_CAPABILITY_CATEGORY
    return RestoreConfig(
        max_snapshot_bytes=int(max_mb * 1024 * 1024),
        capability=CapabilityConfig(category=category.strip()),
    )
