"""JSON-ready report handed back to the caller of a restore."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .outcomes import RunSummary


@dataclass(frozen=True, slots=True, kw_only=True)
class RestoreReport:
    summary: RunSummary
    backup_info: object | None
    imported_at: datetime

    @property
    def success(self) -> bool:
        # Record-level failures are part of a successful best-effort restore.
        return True

    def as_dict(self) -> dict[str, object]:
        capability = self.summary.capability
        payload: dict[str, object] = {
            "success": self.success,
            "summary": self.summary.counts(),
            "capability_status": capability.as_dict() if capability else {"configured": False},
            "results": [outcome.as_dict() for outcome in self.summary.outcomes],
        }
        if self.summary.errors:
            payload["errors"] = list(self.summary.errors)
        payload["backup_info"] = self.backup_info
        payload["importedAt"] = self.imported_at.isoformat().replace("+00:00", "Z")
        if self.summary.cancelled:
            payload["cancelled"] = True
        return payload
