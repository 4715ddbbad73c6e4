"""Tests for PolicyService: collaborator lookups around the pure decisions."""

import pytest

from app.application.services.policy_service import PolicyService
from app.domain.entities import ActivityEntity
from app.domain.enums import ActivityStatus, DenyReason, EntityKind, Operation
from app.domain.exceptions import InfrastructureException
from app.domain.value_objects import ALL_REGIONS, FieldIn, MatchNone


@pytest.fixture
def policy(uow_factory) -> PolicyService:
    return PolicyService(uow_factory)


def test_scope(policy, principals) -> None:
    assert policy.scope(principals["superadmin"]) is ALL_REGIONS
    assert policy.scope(principals["admin"]).region_ids == {7}


async def test_conseiller_site_predicate_uses_assignments(policy, store, principals) -> None:
    store.edges = {(4, 11)}
    predicate = await policy.visibility_predicate(principals["conseiller"], EntityKind.SITE)
    assert predicate == FieldIn("id", frozenset({11}))


async def test_conseiller_without_assignments_sees_no_site(policy, principals) -> None:
    predicate = await policy.visibility_predicate(principals["conseiller"], EntityKind.SITE)
    assert predicate == MatchNone()


async def test_can_read_site_loads_assignments(policy, store, principals) -> None:
    store.edges = {(4, 20)}
    assert (await policy.can_read(principals["conseiller"], EntityKind.SITE, store.sites[20])).allowed
    decision = await policy.can_read(principals["conseiller"], EntityKind.SITE, store.sites[10])
    assert decision.reason is DenyReason.NOT_ASSIGNED


async def test_authorize_site_delete_counts_activities(policy, store, principals) -> None:
    store.add_activity(1, site_id=10, created_by_id=4)
    decision = await policy.authorize(principals["admin"], EntityKind.SITE, store.sites[10], "delete")
    assert decision.reason is DenyReason.HAS_DEPENDENTS
    assert decision.details["activities_count"] == 1

    empty = await policy.authorize(principals["admin"], EntityKind.SITE, store.sites[11], "delete")
    assert empty.allowed


async def test_authorize_activity_create_loads_site(policy, principals) -> None:
    ok = await policy.authorize(principals["conseiller"], EntityKind.ACTIVITY, None, "create", site_id=10)
    assert ok.allowed

    mismatch = await policy.authorize(
        principals["admin"], EntityKind.ACTIVITY, None, "create", site_id=20, target_region_id=7
    )
    assert mismatch.reason is DenyReason.SITE_REGION_MISMATCH


async def test_authorize_activity_create_unknown_site(policy, principals) -> None:
    decision = await policy.authorize(
        principals["admin"], EntityKind.ACTIVITY, None, Operation.CREATE, site_id=999
    )
    assert decision.reason is DenyReason.MISSING_ENTITY
    assert decision.details["site_id"] == 999


async def test_conseiller_site_read(policy, store, principals) -> None:
    store.edges = {(4, 10)}
    assert (await policy.authorize(principals["conseiller"], EntityKind.SITE, store.sites[10], "read")).allowed
    denied = await policy.authorize(principals["conseiller"], EntityKind.SITE, store.sites[11], "read")
    assert denied.reason is DenyReason.NOT_ASSIGNED


async def test_transition_and_update(policy, store, principals) -> None:
    activity = store.add_activity(1, site_id=10, created_by_id=4)
    assert (await policy.transition_activity(principals["superviseur"], activity, "approuve")).allowed

    approved = ActivityEntity(1, 7, 10, 4, ActivityStatus.APPROUVE)
    decision = await policy.transition_activity(principals["admin"], approved, "rejete")
    assert decision.reason is DenyReason.ALREADY_FINALIZED

    update = await policy.authorize_activity_update(principals["conseiller"], approved, {"theme": "x"})
    assert update.reason is DenyReason.NOT_PENDING


async def test_assignment_delegation(policy, store, principals) -> None:
    result = await policy.assign_sites(principals["admin"], 4, [10, 11])
    assert result.ok
    assert await policy.assigned_sites(4) == {10, 11}

    await policy.unassign_site(principals["admin"], 4, 11)
    assert await policy.assigned_sites(4) == {10}

    store.add_user(4, "conseiller", {9})
    assert [s.id for s in await policy.find_out_of_scope_assignments(4)] == [10]


async def test_collaborator_failure_is_not_a_denial(policy, store, principals) -> None:
    """A database failure propagates; it is never turned into Deny."""
    store.fail_reads = True
    with pytest.raises(InfrastructureException):
        await policy.authorize(principals["admin"], EntityKind.ACTIVITY, None, "create", site_id=10)
    with pytest.raises(InfrastructureException):
        await policy.assign_sites(principals["admin"], 4, {10})
    assert store.edges == set()


async def test_update_loads_the_new_site(policy, store, principals) -> None:
    activity = store.add_activity(1, site_id=10, created_by_id=4)
    changes = {"region_id": 9, "site_id": 20}

    denied = await policy.authorize_activity_update(principals["admin"], activity, changes)
    assert denied.reason is DenyReason.REGION_OUT_OF_SCOPE
    assert (await policy.authorize_activity_update(principals["superadmin"], activity, changes)).allowed

    unknown = await policy.authorize_activity_update(principals["superadmin"], activity, {"site_id": 99})
    assert unknown.reason is DenyReason.MISSING_ENTITY
