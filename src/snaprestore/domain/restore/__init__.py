"""Snapshot restore core.

Layered flow of one restore run:
1) parse and validate the snapshot envelope
2) walk entity kinds in dependency order
3) reconcile each kind's records against the live record store
4) fold per-record outcomes into a run summary
5) probe the restored configuration for dependent capabilities
"""

from __future__ import annotations

from .catalog import DECLARED_KINDS, KIND_BY_NAME, RESTORE_ORDER
from .export import dump_snapshot, export_snapshot
from .kinds import EntityKind
from .ordering import CatalogError, DependencyCycleError, UnknownDependencyError, dependency_order
from .outcomes import Outcome, OutcomeAction, OutcomeAggregator, RunSummary
from .pipeline import RestorePipeline
from .probe import CapabilityStatus, probe_capability
from .reconcile import EntityReconciler, ReconcileKind
from .report import RestoreReport
from .settings import SettingsMergePass
from .snapshot import (
    InvalidEnvelopeError,
    MalformedDocumentError,
    SnapshotDocument,
    SnapshotError,
    SnapshotTooLargeError,
    parse_snapshot,
)

__all__ = [
    "DECLARED_KINDS",
    "KIND_BY_NAME",
    "RESTORE_ORDER",
    "CapabilityStatus",
    "CatalogError",
    "DependencyCycleError",
    "EntityKind",
    "EntityReconciler",
    "InvalidEnvelopeError",
    "MalformedDocumentError",
    "Outcome",
    "OutcomeAction",
    "OutcomeAggregator",
    "ReconcileKind",
    "RestorePipeline",
    "RestoreReport",
    "RunSummary",
    "SettingsMergePass",
    "SnapshotDocument",
    "SnapshotError",
    "SnapshotTooLargeError",
    "UnknownDependencyError",
    "dependency_order",
    "dump_snapshot",
    "export_snapshot",
    "parse_snapshot",
    "probe_capability",
]
