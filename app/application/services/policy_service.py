"""Policy facade: the one entry point request handlers call.

Wraps the pure decision functions and fetches what they need from the
persistence collaborator (assigned sites, dependents count, referenced
site). Denials come back as Decision values; collaborator failures
propagate as InfrastructureException.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from app.application.services.activity_workflow import can_transition
from app.application.services.assignment_index import AssignmentIndex, UnitOfWorkFactory
from app.application.services.mutation_authorizer import (
    authorize,
    authorize_activity_update,
)
from app.application.services.region_scope import resolve_scope
from app.application.services.visibility import can_read, visibility_predicate
from app.domain.entities import ActivityEntity, Principal, SiteEntity
from app.domain.enums import ActivityStatus, DenyReason, EntityKind, Operation, Role
from app.domain.value_objects import (
    AssignmentResult,
    Decision,
    Predicate,
    Scope,
)
from app.shared.telemetry.tracing import add_span_attributes, add_span_event, traced

logger = logging.getLogger(__name__)


class PolicyService:
    """Authorization and workflow decisions for sites, activities and users."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory
        self.assignments = AssignmentIndex(uow_factory)

    def scope(self, principal: Principal) -> Scope:
        return resolve_scope(principal)

    @traced("policy.visibility_predicate")
    async def visibility_predicate(self, principal: Principal, kind: EntityKind) -> Predicate:
        """Return the list-query restriction for principal on kind."""
        assigned: Iterable[int] | None = None
        if kind is EntityKind.SITE and principal.role is Role.CONSEILLER:
            assigned = await self.assignments.assigned_sites(principal.id)
        return visibility_predicate(principal, kind, assigned)

    @traced("policy.can_read")
    async def can_read(self, principal: Principal, kind: EntityKind, entity: Any) -> Decision:
        assigned: Iterable[int] | None = None
        if kind is EntityKind.SITE and principal.role is Role.CONSEILLER:
            assigned = await self.assignments.assigned_sites(principal.id)
        return can_read(principal, kind, entity, assigned)

    @traced("policy.authorize")
    async def authorize(
        self,
        principal: Principal,
        kind: EntityKind,
        existing: Any,
        operation: Operation | str,
        *,
        target_region_id: int | None = None,
        site_id: int | None = None,
        new_status: ActivityStatus | str | None = None,
    ) -> Decision:
        """Authorize operation, loading dependents and the referenced site as needed.

        Args:
            principal: The acting principal.
            kind: Entity kind.
            existing: Current snapshot (None for create).
            operation: Requested operation.
            target_region_id: Region of a new entity, or a site's new region.
            site_id: Site referenced by a new activity.
            new_status: Requested activity status for status_change.
        """
        operation = Operation(operation)
        add_span_attributes(
            **{
                "policy.kind": kind.value,
                "policy.operation": operation.value,
                "policy.role": principal.role.value,
            }
        )
        loads_site = (
            kind is EntityKind.ACTIVITY
            and operation is Operation.CREATE
            and site_id is not None
        )
        dependents = 0
        site: SiteEntity | None = None
        assigned: Iterable[int] | None = None
        async with self._uow_factory() as uow:
            if (
                kind is EntityKind.SITE
                and operation is Operation.DELETE
                and isinstance(existing, SiteEntity)
            ):
                dependents = await uow.sites.count_activities(existing.id)
            if loads_site:
                site = await uow.sites.get_by_id(site_id)
            if (
                kind is EntityKind.SITE
                and operation is Operation.READ
                and principal.role is Role.CONSEILLER
            ):
                assigned = await uow.assignments.get_assigned_site_ids(principal.id)
        if loads_site and site is None:
            logger.info("Activity create references unknown site %s", site_id)
            return Decision.deny(
                DenyReason.MISSING_ENTITY,
                f"Site {site_id} not found",
                site_id=site_id,
            )
        decision = authorize(
            principal,
            kind,
            existing,
            operation,
            dependents=dependents,
            target_region_id=target_region_id,
            site=site,
            new_status=new_status,
            assigned_site_ids=assigned,
        )
        if decision.denied and decision.reason is not None:
            add_span_event("policy.denied", {"reason": decision.reason.value})
        return decision

    @traced("policy.authorize_activity_update")
    async def authorize_activity_update(
        self,
        principal: Principal,
        existing: ActivityEntity,
        changes: Mapping[str, Any],
    ) -> Decision:
        site: SiteEntity | None = None
        site_id = changes.get("site_id")
        if site_id is not None and site_id != existing.site_id:
            async with self._uow_factory() as uow:
                site = await uow.sites.get_by_id(site_id)
        return authorize_activity_update(principal, existing, changes, site=site)

    @traced("policy.transition_activity")
    async def transition_activity(
        self,
        principal: Principal,
        activity: ActivityEntity,
        new_status: ActivityStatus | str,
    ) -> Decision:
        return can_transition(principal, activity, new_status)

    @traced("policy.assign_sites")
    async def assign_sites(
        self, principal: Principal, conseiller_id: int, site_ids: Iterable[int]
    ) -> AssignmentResult:
        return await self.assignments.assign(principal, conseiller_id, site_ids)

    @traced("policy.unassign_site")
    async def unassign_site(
        self, principal: Principal, conseiller_id: int, site_id: int
    ) -> AssignmentResult:
        return await self.assignments.unassign(principal, conseiller_id, site_id)

    @traced("policy.assigned_sites")
    async def assigned_sites(self, conseiller_id: int) -> frozenset[int]:
        return await self.assignments.assigned_sites(conseiller_id)

    @traced("policy.find_out_of_scope_assignments")
    async def find_out_of_scope_assignments(self, conseiller_id: int) -> list[SiteEntity]:
        return await self.assignments.find_out_of_scope_assignments(conseiller_id)
