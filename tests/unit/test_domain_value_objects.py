"""Tests for domain value objects: scopes, predicates, decisions, assignment results."""

from app.domain.enums import AssignmentErrorKind, DenyReason
from app.domain.value_objects import (
    ALL_REGIONS,
    AllOf,
    AssignmentError,
    AssignmentResult,
    Decision,
    FieldEquals,
    FieldIn,
    MatchAll,
    MatchNone,
    RegionSet,
    all_of,
    first_denial,
)


class TestRegionSet:
    def test_coerces_to_frozenset(self) -> None:
        assert RegionSet({1, 2}).region_ids == frozenset({1, 2})

    def test_overlaps(self) -> None:
        assert RegionSet({1, 2}).overlaps([2, 3])
        assert not RegionSet({1}).overlaps([3])
        assert ALL_REGIONS.overlaps([])


class TestPredicates:
    def test_empty_field_in_matches_nothing(self) -> None:
        predicate = FieldIn("id", [])
        assert predicate.matches_nothing
        assert not predicate.matches({"id": 1})

    def test_field_equals_reads_attribute_or_key(self) -> None:
        predicate = FieldEquals("created_by_id", 4)
        assert predicate.matches({"created_by_id": 4})
        assert not predicate.matches(object())

    def test_all_of_drops_match_all(self) -> None:
        region = FieldIn("region_id", {7})
        assert all_of(MatchAll(), region) == region
        assert all_of() == MatchAll()

    def test_all_of_collapses_to_match_none(self) -> None:
        assert all_of(FieldIn("region_id", {7}), MatchNone()) == MatchNone()
        assert all_of(FieldIn("id", set())) == MatchNone()

    def test_all_of_conjunction(self) -> None:
        combined = all_of(FieldIn("region_id", {7}), FieldEquals("created_by_id", 4))
        assert isinstance(combined, AllOf)
        assert combined.matches({"region_id": 7, "created_by_id": 4})
        assert not combined.matches({"region_id": 7, "created_by_id": 5})


class TestDecision:
    def test_allow_details_are_not_shared(self) -> None:
        first = Decision.allow()
        first.details["note"] = "scratch"
        assert Decision.allow().details == {}
        assert Decision.allow() == first
        assert Decision.allow().to_dict()["reason"] is None

    def test_deny_sorts_set_details(self) -> None:
        decision = Decision.deny(
            DenyReason.REGION_OUT_OF_SCOPE, "out", principal_region_ids=frozenset({9, 7})
        )
        assert decision.denied
        assert decision.to_dict() == {
            "allowed": False,
            "reason": "region_out_of_scope",
            "message": "out",
            "details": {"principal_region_ids": [7, 9]},
        }

    def test_first_denial(self) -> None:
        denied = Decision.deny(DenyReason.NOT_OWNER, "no")
        later = Decision.deny(DenyReason.NOT_PENDING, "no")
        assert first_denial(Decision.allow(), denied, later) is denied
        assert first_denial().allowed


class TestAssignmentResult:
    def test_success(self) -> None:
        result = AssignmentResult.success([3, 1])
        assert result.ok
        assert result.site_ids == frozenset({1, 3})

    def test_failure_sorts_ids(self) -> None:
        error = AssignmentError.build(
            AssignmentErrorKind.OUT_OF_SCOPE, "out", user_id=4, site_ids={20, 12}, region_ids={7}
        )
        result = AssignmentResult.failure(error)
        assert not result.ok
        assert result.site_ids == frozenset()
        assert error.to_dict() == {
            "kind": "out_of_scope",
            "message": "out",
            "user_id": 4,
            "site_ids": [12, 20],
            "region_ids": [7],
        }
