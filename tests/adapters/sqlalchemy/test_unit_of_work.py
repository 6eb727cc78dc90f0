from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from snaprestore.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyRestoreUnitOfWork,
    StartupError,
    configured_engine,
    create_store_engine,
    is_started,
    shutdown,
    startup,
)
from snaprestore.domain.ports import RecordStoreError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_restore_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyRestoreUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_store_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_store_engine("sqlite+pysqlite:///:memory:")

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_uses_configured_database_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    startup()

    engine = configured_engine()
    assert engine is not None
    assert engine.dialect.name == "sqlite"


def test_repositories_require_an_open_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyRestoreUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_committed_records_are_visible_to_the_next_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyRestoreUnitOfWork() as uow:
        uow.repositories.records.insert("roles", {"id": "r1", "name": "Admin"})
        uow.commit()

    with SqlAlchemyRestoreUnitOfWork() as uow:
        assert uow.repositories.records.find_one("roles", {"id": "r1"}) is not None


def test_uncommitted_records_are_discarded_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyRestoreUnitOfWork() as uow:
        uow.repositories.records.insert("roles", {"id": "r1", "name": "Admin"})
        raise RuntimeError("boom")

    with SqlAlchemyRestoreUnitOfWork() as uow:
        assert uow.repositories.records.find_one("roles", {"id": "r1"}) is None


def test_failed_write_does_not_discard_earlier_writes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyRestoreUnitOfWork() as uow:
        records = uow.repositories.records
        records.insert("roles", {"id": "r1", "name": "Admin"})
        with pytest.raises(RecordStoreError, match="roles"):
            records.insert("roles", {"id": "r2", "name": "Admin"})
        uow.commit()

    with SqlAlchemyRestoreUnitOfWork() as uow:
        assert [row["id"] for row in uow.repositories.records.find_many("roles")] == ["r1"]
