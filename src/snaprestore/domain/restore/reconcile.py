"""Generic per-kind reconciliation.

One call reconciles one batch of records for one entity kind. Every record ends
up as exactly one outcome; failures stay local to the record that caused them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from .outcomes import MISSING_KEY_REASON, Outcome

if TYPE_CHECKING:
    from collections.abc import Sequence

    from snaprestore.domain.ports import RecordStore

    from .kinds import EntityKind

log = logging.getLogger(__name__)


class ReconcileKind(Protocol):
    """Reconcile a batch of raw records for ``kind`` into ``store``."""

    def __call__(
        self,
        kind: EntityKind,
        records: Sequence[object],
        *,
        store: RecordStore,
    ) -> list[Outcome]: ...


@dataclass(slots=True)
class EntityReconciler:
    """Find-then-insert-or-update reconciler driven by an ``EntityKind``."""

    def __call__(
        self,
        kind: EntityKind,
        records: Sequence[object],
        *,
        store: RecordStore,
    ) -> list[Outcome]:
        return [self.reconcile_record(kind, record, store=store) for record in records]

    def reconcile_record(
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
                store.update(kind.name, key, kind.update_values(record))
                return Outcome.updated(kind.name, label)
            store.insert(kind.name, kind.insert_values(record))
            return Outcome.imported(kind.name, label)
        except Exception as exc:  # noqa: BLE001
            return write_failure(kind.name, label, exc)


def write_failure(kind_name: str, label: str, exc: Exception) -> Outcome:
    log.warning("Skipping %s record %s: %s", kind_name, label, exc)
    return Outcome.skipped(kind_name, label, reason=f"{kind_name}:{label}")
