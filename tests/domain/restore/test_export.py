from __future__ import annotations

import json
from datetime import UTC, datetime

from snaprestore.domain.restore import (
    RESTORE_ORDER,
    dump_snapshot,
    export_snapshot,
    parse_snapshot,
)
from tests.support.records import InMemoryRecordStore

NOW = datetime(2024, 6, 1, 8, 30, tzinfo=UTC)


def test_export_writes_every_kind_and_system_info() -> None:
    store = InMemoryRecordStore()
    store.insert("roles", {"id": "r1", "name": "Admin", "createdAt": NOW, "internal": "x"})

    document = export_snapshot(store, db_provider="sqlite", now=NOW)

    data = document["data"]
    assert isinstance(data, dict)
    assert document["timestamp"] == "2024-06-01T08:30:00Z"
    assert data["system_info"]["db_provider"] == "sqlite"
    assert data["system_info"]["exported_at"] == "2024-06-01T08:30:00Z"
    assert set(data) == {"system_info", *(kind.name for kind in RESTORE_ORDER)}
    assert data["roles"] == [{"id": "r1", "name": "Admin", "createdAt": "2024-06-01T08:30:00Z"}]


def test_exported_snapshot_parses_back() -> None:
    store = InMemoryRecordStore()
    store.insert("settings", {"category": "email", "key": "smtpHost", "value": "h", "type": "s"})

    raw = dump_snapshot(export_snapshot(store, now=NOW))
    document = parse_snapshot(raw)

    assert document.data["settings"][0]["key"] == "smtpHost"
    assert document.system_info is not None


def test_dump_snapshot_renders_naive_datetimes_as_utc() -> None:
    raw = dump_snapshot({"timestamp": datetime(2024, 1, 1), "data": {}})  # noqa: DTZ001

    assert json.loads(raw)["timestamp"] == "2024-01-01T00:00:00Z"
