"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from snaprestore.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyRestoreUnitOfWork,
    configured_engine,
    is_started,
    startup,
)
from snaprestore.config import get_restore_config
from snaprestore.domain.ports import RestoreUnitOfWork
from snaprestore.domain.restore import (
    RestorePipeline,
    RestoreReport,
    dump_snapshot,
    export_snapshot,
    parse_snapshot,
)

if TYPE_CHECKING:
    from threading import Event

    from snaprestore.config import RestoreConfig

UnitOfWorkFactory = Callable[[], RestoreUnitOfWork]


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyRestoreUnitOfWork


def restore_snapshot(
    raw: bytes | str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: RestoreConfig | None = None,
    cancel: Event | None = None,
) -> RestoreReport:
    """Restore a snapshot into the configured record store."""

    effective_config = config or get_restore_config()
    document = parse_snapshot(raw, max_bytes=effective_config.max_snapshot_bytes)
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    log.info(
        "Starting restore: timestamp=%s, sections=%s",
        document.timestamp,
        len(document.data),
    )

    pipeline = RestorePipeline(capability=effective_config.capability)
    summary = pipeline.run(document, unit_of_work_factory=effective_uow, cancel=cancel)
    report = RestoreReport(
        summary=summary,
        backup_info=document.system_info,
        imported_at=datetime.now(UTC),
    )

    log.info(
        f"Finished restore: imported={summary.imported}, updated={summary.updated}, "
        f"skipped={summary.skipped}, errors={summary.error_count}, "
        f"capability_configured={bool(summary.capability and summary.capability.configured)}, "
        f"cancelled={summary.cancelled}"
    )
    return report


def export_snapshot_bytes(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> bytes:
    """Export every known kind from the record store as snapshot bytes."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    engine = configured_engine()
    db_provider = engine.dialect.name if engine is not None else None
    with effective_uow() as uow:
        document = export_snapshot(uow.repositories.records, db_provider=db_provider)
    log.info("Exported snapshot at %s", document["timestamp"])
    return dump_snapshot(document)
