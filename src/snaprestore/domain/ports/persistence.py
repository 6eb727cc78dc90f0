"""Ports for the live record store the restore engine writes into."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

type Record = dict[str, Any]
type NaturalKey = Mapping[str, object]


class RecordStoreError(RuntimeError):
    """Raised by store adapters when a read or write fails."""


class UnknownKindError(RecordStoreError):
    """Raised when a store has no storage for an entity kind."""


@runtime_checkable
class RecordStore(Protocol):
    """Keyed store with find/insert/update semantics per entity kind.

    Keys and values use the snapshot's field names (``roleId``, ``createdAt``).
    Implementations enforce uniqueness of each kind's natural key and must leave
    the store usable after a failed write.
    """

    def find_one(self, kind: str, key: NaturalKey) -> Record | None: ...

    def find_many(self, kind: str, where: NaturalKey | None = None) -> list[Record]: ...

    def insert(self, kind: str, values: Mapping[str, object]) -> None: ...

    def update(self, kind: str, key: NaturalKey, values: Mapping[str, object]) -> None: ...
