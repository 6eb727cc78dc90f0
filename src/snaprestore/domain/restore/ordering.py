"""Dependency ordering for entity kinds."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .kinds import EntityKind


class CatalogError(ValueError):
    """Raised when a set of entity kinds cannot be ordered."""


class DependencyCycleError(CatalogError):
    """Raised when entity kinds depend on each other in a cycle."""


class UnknownDependencyError(CatalogError):
    """Raised when a kind depends on a kind that is not declared."""


def dependency_order(kinds: Iterable[EntityKind]) -> tuple[EntityKind, ...]:
    """Return ``kinds`` so that every kind follows all of its dependencies.

    The sort is stable: among kinds whose dependencies are satisfied, the one
    declared first comes first. This keeps the order deterministic and close to
    the declaration order.
    """

    declared = list(kinds)
    by_name: dict[str, EntityKind] = {}
    for kind in declared:
        if kind.name in by_name:
            raise CatalogError(f"Entity kind {kind.name} declared twice")
        by_name[kind.name] = kind

    for kind in declared:
        for dependency in kind.depends_on:
            if dependency not in by_name:
                raise UnknownDependencyError(
                    f"Entity kind {kind.name} depends on undeclared kind {dependency}"
                )

    ordered: list[EntityKind] = []
    placed: set[str] = set()
    pending = declared
    while pending:
        remaining: list[EntityKind] = []
        progressed = False
        for kind in pending:
            if not progressed and all(dep in placed for dep in kind.depends_on):
                ordered.append(kind)
                placed.add(kind.name)
                progressed = True
            else:
                remaining.append(kind)
        if not progressed:
            names = ", ".join(kind.name for kind in remaining)
            raise DependencyCycleError(f"Dependency cycle between entity kinds: {names}")
        pending = remaining
    return tuple(ordered)
