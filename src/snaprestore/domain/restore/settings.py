"""Merge pass for key-value settings.

Settings are matched on ``(category, key)`` rather than on their primary id, and
the create/update decision is made by an explicit lookup so that a freshly
introduced entry is reported as ``imported``. On update, an incoming record
without a description or options keeps the stored ones.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .outcomes import MISSING_KEY_REASON, Outcome
from .reconcile import write_failure

if TYPE_CHECKING:
    from collections.abc import Sequence

    from snaprestore.domain.ports import Record, RecordStore

    from .kinds import EntityKind

REQUIRED_ON_CREATE: tuple[str, ...] = ("value", "type")


def _present(value: object) -> bool:
    return value is not None and value != ""


@dataclass(slots=True)
class SettingsMergePass:
    def __call__(
        self,
        kind: EntityKind,
        records: Sequence[object],
        *,
        store: RecordStore,
    ) -> list[Outcome]:
        return [self.merge_record(kind, record, store=store) for record in records]

    def merge_record(
        self,
        kind: EntityKind,
        record: object,
        *,
        store: RecordStore,
    ) -> Outcome:
        if not isinstance(record, Mapping):
            return Outcome.skipped(kind.name, "unknown", reason=MISSING_KEY_REASON)
        label = kind.label(record)
        key = kind.natural_key(record)
        if key is None:
            return Outcome.skipped(kind.name, label, reason=MISSING_KEY_REASON)

        try:
            existing = store.find_one(kind.name, key)
            if existing is not None:
                store.update(kind.name, key, self._update_values(record, existing))
                return Outcome.updated(kind.name, label)

            missing = [name for name in REQUIRED_ON_CREATE if record.get(name) is None]
            if missing:
                return Outcome.skipped(kind.name, label, reason=f"missing-field:{missing[0]}")
            store.insert(kind.name, self._create_values(record, key))
            return Outcome.imported(kind.name, label)
        except Exception as exc:  # noqa: BLE001
            return write_failure(kind.name, label, exc)

    @staticmethod
    def _update_values(record: Mapping[str, object], existing: Record) -> dict[str, object]:
        values = {name: record[name] for name in ("name", "value", "type") if name in record}
        for name in ("description", "options"):
            incoming = record.get(name)
            values[name] = incoming if _present(incoming) else existing.get(name)
        return values

    @staticmethod
    def _create_values(
        record: Mapping[str, object],
        key: Mapping[str, object],
    ) -> dict[str, object]:
        description = record.get("description")
        return {
            **key,
            "name": record.get("name") or key["key"],
            "value": record["value"],
            "type": record["type"],
            "description": description if _present(description) else "",
            "options": record.get("options"),
            "isSystem": bool(record.get("isSystem") or False),
        }
