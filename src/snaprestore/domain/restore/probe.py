"""Read-only check of whether outbound email is usable after a restore."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from snaprestore.config import CapabilityConfig

if TYPE_CHECKING:
    from snaprestore.domain.ports import RecordStore

SETTINGS_KIND = "settings"


@dataclass(frozen=True, slots=True, kw_only=True)
class CapabilityStatus:
    """Redacted view of the capability settings. The password never leaves the store."""

    configured: bool
    smtp_host: object | None = None
    smtp_user: object | None = None
    from_name: object | None = None
    has_password: bool = False

    def as_dict(self) -> dict[str, object]:
        return {
            "configured": self.configured,
            "smtp_host": self.smtp_host,
            "smtp_user": self.smtp_user,
            "from_name": self.from_name,
            "has_password": self.has_password,
        }


def decode_setting_value(value: object) -> object:
    """Decode a stored setting value as JSON, keeping the raw value when that fails."""

    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def probe_capability(
    store: RecordStore,
    *,
    config: CapabilityConfig | None = None,
) -> CapabilityStatus:
    cfg = config or CapabilityConfig()
    rows = store.find_many(SETTINGS_KIND, {"category": cfg.category})
    values = {str(row.get("key")): decode_setting_value(row.get("value")) for row in rows}

    host = values.get(cfg.host_key) or None
    user = values.get(cfg.user_key) or None
    has_password = bool(values.get(cfg.password_key))
    return CapabilityStatus(
        configured=bool(host and user and has_password),
        smtp_host=host,
        smtp_user=user,
        from_name=values.get(cfg.from_name_key) or None,
        has_password=has_password,
    )
