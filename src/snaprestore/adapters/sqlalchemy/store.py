"""Record store backed by a SQLAlchemy session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError

from snaprestore.adapters.sqlalchemy.tables import TABLE_BY_KIND
from snaprestore.domain.ports import Record, RecordStoreError, UnknownKindError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import ColumnElement, Row, Table
    from sqlalchemy.orm import Session

    from snaprestore.domain.ports import NaturalKey


class SqlAlchemyRecordStore:
    """Kind-addressed reads and writes on top of Core tables.

    Every write runs inside its own savepoint, so a rejected record is rolled back
    on its own and the surrounding transaction stays usable for the next one.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_one(self, kind: str, key: NaturalKey) -> Record | None:
        table = self._table(kind)
        stmt = select(table).where(self._match(table, key)).limit(1)
        try:
            row = self.session.execute(stmt).first()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Lookup in {kind} failed: {exc}") from exc
        return None if row is None else _as_record(table, row)

    def find_many(self, kind: str, where: Mapping[str, object] | None = None) -> list[Record]:
        table = self._table(kind)
        stmt = select(table)
        if where:
            stmt = stmt.where(self._match(table, where))
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Query on {kind} failed: {exc}") from exc
        return [_as_record(table, row) for row in rows]

    def insert(self, kind: str, values: Mapping[str, object]) -> None:
        table = self._table(kind)
        try:
            with self.session.begin_nested():
                self.session.execute(table.insert().values(dict(values)))
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Insert into {kind} failed: {exc}") from exc

    def update(self, kind: str, key: NaturalKey, values: Mapping[str, object]) -> None:
        if not values:
            return
        table = self._table(kind)
        stmt = table.update().where(self._match(table, key)).values(dict(values))
        try:
            with self.session.begin_nested():
                self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Update of {kind} failed: {exc}") from exc

    @staticmethod
    def _table(kind: str) -> Table:
        try:
            return TABLE_BY_KIND[kind]
        except KeyError:
            raise UnknownKindError(f"No table for entity kind {kind!r}") from None

    @staticmethod
    def _match(table: Table, criteria: Mapping[str, object]) -> ColumnElement[bool]:
        try:
            clauses = [table.c[name] == value for name, value in criteria.items()]
        except KeyError as exc:
            raise RecordStoreError(f"{table.name} has no column {exc.args[0]!r}") from None
        return and_(*clauses)


def _as_record(table: Table, row: Row[tuple[object, ...]]) -> Record:
    mapping = row._mapping  # noqa: SLF001
    return {column.key: mapping[column] for column in table.columns}
