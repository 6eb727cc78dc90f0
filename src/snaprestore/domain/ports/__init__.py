"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import NaturalKey, Record, RecordStore, RecordStoreError, UnknownKindError
from .unit_of_work import RestoreRepositories, RestoreUnitOfWork

__all__ = [
    "NaturalKey",
    "Record",
    "RecordStore",
    "RecordStoreError",
    "RestoreRepositories",
    "RestoreUnitOfWork",
    "UnknownKindError",
]
