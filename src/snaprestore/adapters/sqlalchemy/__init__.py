"""SQLAlchemy adapter package for snaprestore."""

from __future__ import annotations

from .store import SqlAlchemyRecordStore
from .tables import TABLE_BY_KIND, create_all_tables, metadata
from .unit_of_work import (
    SqlAlchemyRestoreUnitOfWork,
    StartupError,
    create_store_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "TABLE_BY_KIND",
    "SqlAlchemyRecordStore",
    "SqlAlchemyRestoreUnitOfWork",
    "StartupError",
    "create_all_tables",
    "create_store_engine",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
