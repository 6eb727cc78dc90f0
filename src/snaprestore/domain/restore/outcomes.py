"""Per-record outcomes and their aggregation into a run summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .probe import CapabilityStatus

MISSING_KEY_REASON = "missing-key"


class OutcomeAction(StrEnum):
    IMPORTED = "imported"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True, kw_only=True)
class Outcome:
    """Result of reconciling one record.

    ``error`` holds the ``<kind>:<label>`` identifier for skipped records and is
    ``None`` otherwise.
    """

    entity: str
    id: str
    action: OutcomeAction
    reason: str | None = None
    error: str | None = None

    @classmethod
    def imported(cls, entity: str, record_id: str) -> Outcome:
        return cls(entity=entity, id=record_id, action=OutcomeAction.IMPORTED)

    @classmethod
    def updated(cls, entity: str, record_id: str) -> Outcome:
        return cls(entity=entity, id=record_id, action=OutcomeAction.UPDATED)

    @classmethod
    def skipped(cls, entity: str, record_id: str, *, reason: str) -> Outcome:
        return cls(
            entity=entity,
            id=record_id,
            action=OutcomeAction.SKIPPED,
            reason=reason,
            error=f"{entity}:{record_id}",
        )

    def as_dict(self) -> dict[str, str]:
        payload = {"entity": self.entity, "id": self.id, "action": self.action.value}
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload


@dataclass(frozen=True, slots=True, kw_only=True)
class RunSummary:
    """Aggregate report of one pipeline execution."""

    imported: int
    updated: int
    skipped: int
    outcomes: tuple[Outcome, ...]
    errors: tuple[str, ...]
    capability: CapabilityStatus | None = None
    kinds: tuple[str, ...] = ()
    cancelled: bool = False

    @property
    def total(self) -> int:
        return self.imported + self.updated + self.skipped

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def counts(self) -> dict[str, int]:
        return {
            "imported": self.imported,
            "updated": self.updated,
            "skipped": self.skipped,
            "total": self.total,
            "errors": self.error_count,
        }


@dataclass(slots=True)
class OutcomeAggregator:
    """Append-only collection of outcomes; every count is derived from it."""

    _outcomes: list[Outcome] = field(default_factory=list["Outcome"], repr=False)
    _kinds: list[str] = field(default_factory=list[str], repr=False)

    def add(self, outcomes: Iterable[Outcome], *, kind: str | None = None) -> None:
        self._outcomes.extend(outcomes)
        if kind is not None:
            self._kinds.append(kind)

    @property
    def outcomes(self) -> tuple[Outcome, ...]:
        return tuple(self._outcomes)

    def count(self, action: OutcomeAction) -> int:
        return sum(1 for outcome in self._outcomes if outcome.action is action)

    def errors(self) -> tuple[str, ...]:
        return tuple(outcome.error for outcome in self._outcomes if outcome.error is not None)

    def summary(
        self,
        *,
        capability: CapabilityStatus | None = None,
        cancelled: bool = False,
    ) -> RunSummary:
        return RunSummary(
            imported=self.count(OutcomeAction.IMPORTED),
            updated=self.count(OutcomeAction.UPDATED),
            skipped=self.count(OutcomeAction.SKIPPED),
            outcomes=self.outcomes,
            errors=self.errors(),
            capability=capability,
            kinds=tuple(self._kinds),
            cancelled=cancelled,
        )
