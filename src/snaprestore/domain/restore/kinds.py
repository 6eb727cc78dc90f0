"""Entity kind descriptors.

A descriptor tells the generic reconciler everything it needs to know about one
kind of record in a snapshot:

- which fields identify a record in the live store (the natural key)
- which fields are written on every restore and which only on creation
- which other kinds must already be restored before this one
- which payload spellings refer to the kind
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snaprestore.domain.ports import NaturalKey

DEFAULT_CREATE_ONLY_FIELDS: tuple[str, ...] = ("createdAt", "updatedAt")
UNKNOWN_LABEL = "unknown"


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityKind:
    """Declarative description of one entity kind."""

    name: str
    fields: tuple[str, ...]
    key: tuple[str, ...] = ("id",)
    create_only: tuple[str, ...] = DEFAULT_CREATE_ONLY_FIELDS
    depends_on: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    label_field: str = "id"
    _spellings: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError(f"Entity kind {self.name} needs at least one key field")
        overlap = set(self.fields) & set(self.create_only)
        if overlap:
            raise ValueError(
                f"Entity kind {self.name} lists {sorted(overlap)} as both always-write and create-only"
            )
        spellings = [self.name]
        for candidate in (camel_case(self.name), *self.aliases):
            if candidate not in spellings:
                spellings.append(candidate)
        object.__setattr__(self, "_spellings", tuple(spellings))

    @property
    def spellings(self) -> tuple[str, ...]:
        """Payload keys accepted for this kind, preferred spelling first."""
        return self._spellings

    def records_in(self, payload: Mapping[str, object]) -> list[object] | None:
        """Return this kind's record list from a snapshot payload, if any.

        The first spelling that holds a list wins. Anything that is not a list means
        the kind is absent from the snapshot.
        """

        for spelling in self._spellings:
            value = payload.get(spelling)
            if isinstance(value, list):
                return value
        return None

    def natural_key(self, record: Mapping[str, object]) -> NaturalKey | None:
        """Extract the natural key, or ``None`` when any key field is missing or blank."""

        values: dict[str, object] = {}
        for name in self.key:
            value = record.get(name)
            if _is_blank(value):
                return None
            values[name] = value
        return values

    def label(self, record: Mapping[str, object]) -> str:
        """Stable identifier for audit entries and error identifiers."""

        value = record.get(self.label_field)
        if not _is_blank(value):
            return str(value)
        parts = [record.get(name) for name in self.key]
        if all(not _is_blank(part) for part in parts):
            return "/".join(str(part) for part in parts)
        return UNKNOWN_LABEL

    def update_values(self, record: Mapping[str, object]) -> dict[str, object]:
        """Always-write fields carried by ``record``; create-only fields never appear."""

        return {name: record[name] for name in self.fields if name in record}

    def insert_values(self, record: Mapping[str, object]) -> dict[str, object]:
        """Every known field carried by ``record``, natural key included."""

        values = {name: record[name] for name in self.key}
        for name in (*self.fields, *self.create_only):
            if name in record and name not in values:
                values[name] = record[name]
        return values
