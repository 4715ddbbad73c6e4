"""Domain value objects: scope, predicates, decisions, assignment results."""

from app.domain.value_objects.assignment import AssignmentError, AssignmentResult
from app.domain.value_objects.decision import Decision, first_denial
from app.domain.value_objects.predicate import (
    AllOf,
    AnyOverlap,
    FieldEquals,
    FieldIn,
    MatchAll,
    MatchNone,
    Predicate,
    all_of,
)
from app.domain.value_objects.scope import ALL_REGIONS, AllRegions, RegionSet, Scope

__all__ = [
    "ALL_REGIONS",
    "AllOf",
    "AllRegions",
    "AnyOverlap",
    "AssignmentError",
    "AssignmentResult",
    "Decision",
    "FieldEquals",
    "FieldIn",
    "MatchAll",
    "MatchNone",
    "Predicate",
    "RegionSet",
    "Scope",
    "all_of",
    "first_denial",
]
