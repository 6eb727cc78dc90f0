"""Unit-of-work abstraction around one restore run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from .persistence import RecordStore


@dataclass(slots=True)
class RestoreRepositories:
    """Repositories available while restoring a snapshot."""

    records: RecordStore


@runtime_checkable
class RestoreUnitOfWork(Protocol):
    """Transaction boundary around the record store."""

    @property
    def repositories(self) -> RestoreRepositories: ...

    def __enter__(self) -> RestoreUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
