"""Tests for AssignmentIndex: validation order, replace semantics, atomicity."""

import logging

from app.application.services.assignment_index import AssignmentIndex
from app.domain.enums import AssignmentErrorKind


async def test_out_of_scope_site_refuses_whole_write(store, uow_factory, principals) -> None:
    """Conseiller in region 7; site 20 lies in region 9: nothing is written."""
    store.edges = {(4, 11)}
    index = AssignmentIndex(uow_factory)

    result = await index.assign(principals["admin"], 4, {10, 20})

    assert not result.ok
    assert result.error.kind is AssignmentErrorKind.OUT_OF_SCOPE
    assert result.error.site_ids == (20,)
    assert result.error.region_ids == (7,)
    assert "Parcelle C" in result.error.message
    assert store.assigned(4) == {11}
    assert store.commits == 0
    assert store.rollbacks == 1


async def test_assign_replaces_previous_set(store, uow_factory, principals) -> None:
    index = AssignmentIndex(uow_factory)

    first = await index.assign(principals["admin"], 4, {10})
    second = await index.assign(principals["admin"], 4, {11})

    assert first.ok and first.site_ids == {10}
    assert second.ok and second.site_ids == {11}
    assert await index.assigned_sites(4) == {11}
    assert store.commits == 2


async def test_assign_empty_set_clears_assignments(store, uow_factory, principals) -> None:
    store.edges = {(4, 10), (4, 11)}
    result = await AssignmentIndex(uow_factory).assign(principals["superadmin"], 4, set())
    assert result.ok
    assert store.assigned(4) == frozenset()


async def test_other_conseillers_untouched(store, uow_factory, principals) -> None:
    store.add_user(12, "conseiller", {7})
    store.edges = {(12, 10)}
    await AssignmentIndex(uow_factory).assign(principals["admin"], 4, {11})
    assert store.assigned(12) == {10}


async def test_non_assigner_is_forbidden(store, uow_factory, principals) -> None:
    index = AssignmentIndex(uow_factory)
    for label in ("superviseur", "conseiller"):
        result = await index.assign(principals[label], 4, {10})
        assert result.error.kind is AssignmentErrorKind.FORBIDDEN
    assert store.edges == set()
    # Refused before any unit of work is opened.
    assert store.rollbacks == 0


async def test_validation_order(store, uow_factory, principals) -> None:
    index = AssignmentIndex(uow_factory)
    admin = principals["superadmin"]

    missing_user = await index.assign(admin, 404, {10})
    assert missing_user.error.kind is AssignmentErrorKind.NOT_FOUND
    assert missing_user.error.user_id == 404

    not_conseiller = await index.assign(admin, 3, {10})
    assert not_conseiller.error.kind is AssignmentErrorKind.ROLE_MISMATCH

    no_region = await index.assign(admin, 8, {99})
    assert no_region.error.kind is AssignmentErrorKind.NO_REGION

    missing_site = await index.assign(admin, 4, {10, 99, 20})
    assert missing_site.error.kind is AssignmentErrorKind.NOT_FOUND
    assert missing_site.error.site_ids == (99,)


async def test_scope_is_the_conseillers_not_the_admins(store, uow_factory, principals) -> None:
    """An admin of region 9 may assign region-7 sites to a region-7 conseiller."""
    result = await AssignmentIndex(uow_factory).assign(principals["admin_other"], 4, {10})
    assert result.ok


async def test_unassign(store, uow_factory, principals) -> None:
    store.edges = {(4, 10), (4, 11)}
    index = AssignmentIndex(uow_factory)

    result = await index.unassign(principals["admin"], 4, 10)
    again = await index.unassign(principals["admin"], 4, 10)

    assert result.ok and result.site_ids == {11}
    assert again.ok and again.site_ids == {11}
    assert store.assigned(4) == {11}


async def test_unassign_forbidden_for_conseiller(store, uow_factory, principals) -> None:
    store.edges = {(4, 10)}
    result = await AssignmentIndex(uow_factory).unassign(principals["conseiller"], 4, 10)
    assert result.error.kind is AssignmentErrorKind.FORBIDDEN
    assert result.error.site_ids == (10,)
    assert store.assigned(4) == {10}


async def test_reads_on_empty_relation(uow_factory) -> None:
    index = AssignmentIndex(uow_factory)
    assert await index.assigned_sites(4) == frozenset()
    assert await index.assigned_users(10) == frozenset()


async def test_assigned_users(store, uow_factory) -> None:
    store.add_user(12, "conseiller", {7})
    store.edges = {(4, 10), (12, 10), (12, 11)}
    assert await AssignmentIndex(uow_factory).assigned_users(10) == {4, 12}


async def test_out_of_scope_report_after_region_removed(store, uow_factory, caplog) -> None:
    """Removing a region from a conseiller leaves stale edges; they are reported, not pruned."""
    store.edges = {(4, 10), (4, 11)}
    store.add_user(4, "conseiller", {9})

    with caplog.at_level(logging.WARNING):
        stale = await AssignmentIndex(uow_factory).find_out_of_scope_assignments(4)

    assert [s.id for s in stale] == [10, 11]
    assert store.assigned(4) == {10, 11}
    assert "Stale assignments" in caplog.text


async def test_out_of_scope_report_empty(store, uow_factory) -> None:
    store.edges = {(4, 10)}
    assert await AssignmentIndex(uow_factory).find_out_of_scope_assignments(4) == []
    assert await AssignmentIndex(uow_factory).find_out_of_scope_assignments(8) == []
