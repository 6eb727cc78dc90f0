"""Snapshot export.

Produces the same envelope ``parse_snapshot`` accepts, so an exported snapshot
can be restored as-is.
"""

from __future__ import annotations

import json
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from snaprestore import __version__

from .catalog import RESTORE_ORDER

if TYPE_CHECKING:
    from collections.abc import Iterable

    from snaprestore.domain.ports import Record, RecordStore

    from .kinds import EntityKind

APP_NAME = "snaprestore"


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _json_default(value: object) -> object:
    if isinstance(value, datetime):
        return _iso(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _export_record(kind: EntityKind, row: Record) -> dict[str, object]:
    names = (*kind.key, *kind.fields, *kind.create_only)
    exported: dict[str, object] = {}
    for name in dict.fromkeys(names):
        if name not in row:
            continue
        value = row[name]
        exported[name] = _iso(value) if isinstance(value, datetime) else value
    return exported


def export_snapshot(
    store: RecordStore,
    *,
    kinds: Iterable[EntityKind] = RESTORE_ORDER,
    db_provider: str | None = None,
    now: datetime | None = None,
) -> dict[str, object]:
    """Read every kind from ``store`` into a snapshot document."""

    exported_at = _iso(now or datetime.now(UTC))
    data: dict[str, object] = {
        "system_info": {
            "app": APP_NAME,
            "version": __version__,
            "db_provider": db_provider,
            "exported_at": exported_at,
        }
    }
    for kind in kinds:
        data[kind.name] = [_export_record(kind, row) for row in store.find_many(kind.name)]
    return {"timestamp": exported_at, "data": data}


def dump_snapshot(document: dict[str, object]) -> bytes:
    return json.dumps(document, default=_json_default, indent=2).encode("utf-8")
