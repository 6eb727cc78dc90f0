"""Dependency-ordered restore pipeline.

Kinds run strictly one after another in dependency order, and each kind is
committed before the next one starts. There is no rollback across kinds: a
partial restore stays visible and is fully described by the returned summary.
Cancellation is honoured only between kinds, so a kind that has started always
finishes and the summary never holds a truncated batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from snaprestore.config import CapabilityConfig
from snaprestore.domain.ports import RecordStoreError

from .catalog import METADATA_SECTIONS, RESTORE_ORDER
from .outcomes import OutcomeAggregator, OutcomeAction
from .probe import CapabilityStatus, probe_capability
from .reconcile import EntityReconciler, ReconcileKind
from .settings import SettingsMergePass

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from threading import Event

    from snaprestore.domain.ports import RestoreUnitOfWork

    from .kinds import EntityKind
    from .outcomes import RunSummary
    from .snapshot import SnapshotDocument

log = logging.getLogger(__name__)


def _default_reconcilers() -> dict[str, ReconcileKind]:
    return {"settings": SettingsMergePass()}


@dataclass(slots=True)
class RestorePipeline:
    """Run the reconciler for every kind present in a snapshot."""

    kinds: tuple[EntityKind, ...] = RESTORE_ORDER
    reconcilers: Mapping[str, ReconcileKind] = field(default_factory=_default_reconcilers)
    default_reconciler: ReconcileKind = field(default_factory=EntityReconciler)
    capability: CapabilityConfig = field(default_factory=CapabilityConfig)

    def run(
        self,
        document: SnapshotDocument,
        *,
        unit_of_work_factory: Callable[[], RestoreUnitOfWork],
        cancel: Event | None = None,
    ) -> RunSummary:
        aggregator = OutcomeAggregator()
        cancelled = False
        self._log_unknown_sections(document.data)

        with unit_of_work_factory() as uow:
            store = uow.repositories.records
            for kind in self.kinds:
                if cancel is not None and cancel.is_set():
                    log.info("Restore cancelled before %s", kind.name)
                    cancelled = True
                    break
                records = kind.records_in(document.data)
                if records is None:
                    continue
                reconcile = self.reconcilers.get(kind.name, self.default_reconciler)
                outcomes = reconcile(kind, records, store=store)
                uow.commit()
                aggregator.add(outcomes, kind=kind.name)
                log.info(
                    "Restored %s: imported=%s, updated=%s, skipped=%s",
                    kind.name,
                    sum(1 for o in outcomes if o.action is OutcomeAction.IMPORTED),
                    sum(1 for o in outcomes if o.action is OutcomeAction.UPDATED),
                    sum(1 for o in outcomes if o.action is OutcomeAction.SKIPPED),
                )

            try:
                capability = probe_capability(store, config=self.capability)
            except RecordStoreError:
                log.warning("Capability probe failed after restore", exc_info=True)
                capability = CapabilityStatus(configured=False)

        return aggregator.summary(capability=capability, cancelled=cancelled)

    def _log_unknown_sections(self, data: Mapping[str, object]) -> None:
        known = {spelling for kind in self.kinds for spelling in kind.spellings}
        unknown = sorted(set(data) - known - METADATA_SECTIONS)
        if unknown:
            log.debug("Ignoring snapshot sections without a restore descriptor: %s", unknown)
