"""Declarative row predicates produced by the visibility filter.

A predicate never fetches rows. Callers either compile it into a storage
query (see app.infrastructure.persistence.predicate_compiler) or evaluate it
against an already-loaded row with matches(). Field names are the canonical
entity attribute names: id, region_id, created_by_id, region_ids.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field as dataclass_field
from typing import Any


def _field_value(row: Any, name: str) -> Any:
    """Read an attribute from an entity, ORM row, or mapping."""
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


class Predicate:
    """Base class for row predicates."""

    def matches(self, row: Any) -> bool:
        raise NotImplementedError

    @property
    def matches_nothing(self) -> bool:
        """True when the predicate is statically known to match no row."""
        return False


@dataclass(frozen=True)
class MatchAll(Predicate):
    """No restriction."""

    def matches(self, row: Any) -> bool:
        return True


@dataclass(frozen=True)
class MatchNone(Predicate):
    """Matches no row (e.g. empty region scope)."""

    def matches(self, row: Any) -> bool:
        return False

    @property
    def matches_nothing(self) -> bool:
        return True


@dataclass(frozen=True)
class FieldIn(Predicate):
    """field ∈ values. An empty values set matches nothing."""

    field: str
    values: frozenset[Any] = dataclass_field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.values, frozenset):
            object.__setattr__(self, "values", frozenset(self.values))

    def matches(self, row: Any) -> bool:
        return _field_value(row, self.field) in self.values

    @property
    def matches_nothing(self) -> bool:
        return not self.values


@dataclass(frozen=True)
class FieldEquals(Predicate):
    """field == value."""

    field: str
    value: Any

    def matches(self, row: Any) -> bool:
        return _field_value(row, self.field) == self.value


@dataclass(frozen=True)
class AnyOverlap(Predicate):
    """The row's collection field shares at least one element with values."""

    field: str
    values: frozenset[Any] = dataclass_field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.values, frozenset):
            object.__setattr__(self, "values", frozenset(self.values))

    def matches(self, row: Any) -> bool:
        current: Iterable[Any] = _field_value(row, self.field) or ()
        return not self.values.isdisjoint(current)

    @property
    def matches_nothing(self) -> bool:
        return not self.values


@dataclass(frozen=True)
class AllOf(Predicate):
    """Conjunction. Used by callers to add their own filters to a visibility predicate."""

    predicates: tuple[Predicate, ...] = ()

    def matches(self, row: Any) -> bool:
        return all(p.matches(row) for p in self.predicates)

    @property
    def matches_nothing(self) -> bool:
        return any(p.matches_nothing for p in self.predicates)


def all_of(*predicates: Predicate) -> Predicate:
    """Combine predicates, dropping MatchAll and collapsing to MatchNone when possible."""
    parts = tuple(p for p in predicates if not isinstance(p, MatchAll))
    if any(p.matches_nothing for p in parts):
        return MatchNone()
    if not parts:
        return MatchAll()
    if len(parts) == 1:
        return parts[0]
    return AllOf(parts)
