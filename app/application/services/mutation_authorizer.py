"""Mutation authorizer: may this principal perform this operation on this entity?

Pure and synchronous. Everything the decision depends on (the existing
entity snapshot, the number of dependents, the target region of a create)
is passed in; PolicyService fetches it from the persistence collaborator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from app.application.services.activity_workflow import can_transition, coerce_status
from app.application.services.region_scope import resolve_scope
from app.application.services.visibility import can_read
from app.domain.entities import (
    BUSINESS_FIELDS,
    ActivityEntity,
    Principal,
    SiteEntity,
    UserEntity,
)
from app.domain.enums import ActivityStatus, DenyReason, EntityKind, Operation, Role
from app.domain.exceptions import ValidationException
from app.domain.value_objects import Decision, first_denial

logger = logging.getLogger(__name__)


def _deny_role(principal: Principal, operation: Operation, kind: EntityKind) -> Decision:
    return Decision.deny(
        DenyReason.ROLE_NOT_ALLOWED,
        f"Role {principal.role.value} may not {operation.value} a {kind.value}",
        role=principal.role.value,
        operation=operation.value,
    )


def _deny_missing(kind: EntityKind, operation: Operation) -> Decision:
    return Decision.deny(
        DenyReason.MISSING_ENTITY,
        f"Cannot {operation.value} a {kind.value} without the existing record",
        operation=operation.value,
    )


def _deny_unsupported(kind: EntityKind, operation: Operation) -> Decision:
    return Decision.deny(
        DenyReason.UNSUPPORTED_OPERATION,
        f"Operation {operation.value} does not apply to a {kind.value}",
        operation=operation.value,
    )


def _scope_decision(principal: Principal, region_id: int | None, what: str) -> Decision:
    if resolve_scope(principal).includes(region_id):
        return Decision.allow()
    return Decision.deny(
        DenyReason.REGION_OUT_OF_SCOPE,
        f"{what} region {region_id} is outside the principal's regions",
        region_id=region_id,
        principal_region_ids=principal.region_ids,
    )


def _require_region(target_region_id: int | None) -> int:
    if target_region_id is None:
        raise ValidationException(
            "target_region_id is required to authorize a create", field="region_id"
        )
    return target_region_id


# ---- Sites ----


def _authorize_site(
    principal: Principal,
    existing: SiteEntity | None,
    operation: Operation,
    *,
    dependents: int,
    target_region_id: int | None,
    assigned_site_ids: Iterable[int] | None,
) -> Decision:
    if operation is Operation.READ:
        if existing is None:
            return _deny_missing(EntityKind.SITE, operation)
        return can_read(principal, EntityKind.SITE, existing, assigned_site_ids)
    if operation is Operation.STATUS_CHANGE:
        return _deny_unsupported(EntityKind.SITE, operation)
    if not principal.role.is_admin_tier:
        return _deny_role(principal, operation, EntityKind.SITE)

    if operation is Operation.CREATE:
        return _scope_decision(principal, _require_region(target_region_id), "Site")

    if existing is None:
        return _deny_missing(EntityKind.SITE, operation)
    decision = _scope_decision(principal, existing.region_id, "Site")
    if decision.denied:
        return decision

    if operation is Operation.UPDATE:
        if target_region_id is not None and target_region_id != existing.region_id:
            return _scope_decision(principal, target_region_id, "New site")
        return Decision.allow()

    # DELETE
    if dependents > 0:
        return Decision.deny(
            DenyReason.HAS_DEPENDENTS,
            f"Site {existing.id} still has {dependents} activit"
            f"{'y' if dependents == 1 else 'ies'}; delete them first",
            site_id=existing.id,
            activities_count=dependents,
        )
    return Decision.allow()


# ---- Activities ----


def _authorize_activity_fields(principal: Principal, existing: ActivityEntity) -> Decision:
    """Business-field update rule, including the pending-only rule for creators."""
    match principal.role:
        case Role.SUPERADMIN:
            return Decision.allow()
        case Role.ADMIN | Role.SUPERVISEUR:
            return _scope_decision(principal, existing.region_id, "Activity")
        case Role.CONSEILLER:
            if not existing.was_created_by(principal.id):
                return Decision.deny(
                    DenyReason.NOT_OWNER,
                    "Conseillers may only modify activities they created",
                    activity_id=existing.id,
                )
            if not existing.is_pending:
                return Decision.deny(
                    DenyReason.NOT_PENDING,
                    "Only activities awaiting validation can be modified",
                    activity_id=existing.id,
                    status=existing.status.value,
                )
            return Decision.allow()


def _authorize_activity(
    principal: Principal,
    existing: ActivityEntity | None,
    operation: Operation,
    *,
    target_region_id: int | None,
    site: SiteEntity | None,
    new_status: ActivityStatus | str | None,
) -> Decision:
    if operation is Operation.CREATE:
        region_id = target_region_id if target_region_id is not None else (
            site.region_id if site is not None else None
        )
        region_id = _require_region(region_id)
        if site is not None and site.region_id != region_id:
            return Decision.deny(
                DenyReason.SITE_REGION_MISMATCH,
                f"Site {site.id} belongs to region {site.region_id}, not {region_id}",
                site_id=site.id,
                site_region_id=site.region_id,
                region_id=region_id,
            )
        return _scope_decision(principal, region_id, "Activity")

    if existing is None:
        return _deny_missing(EntityKind.ACTIVITY, operation)

    match operation:
        case Operation.READ:
            return can_read(principal, EntityKind.ACTIVITY, existing)
        case Operation.UPDATE:
            return _authorize_activity_fields(principal, existing)
        case Operation.STATUS_CHANGE:
            if new_status is None:
                raise ValidationException(
                    "new_status is required for a status change", field="status"
                )
            return can_transition(principal, existing, new_status)
        case Operation.DELETE:
            if not principal.role.is_admin_tier:
                return _deny_role(principal, operation, EntityKind.ACTIVITY)
            return _scope_decision(principal, existing.region_id, "Activity")
    return _deny_unsupported(EntityKind.ACTIVITY, operation)


# ---- Users ----


def _authorize_user(
    principal: Principal,
    existing: UserEntity | None,
    operation: Operation,
) -> Decision:
    match operation:
        case Operation.READ:
            if existing is None:
                return _deny_missing(EntityKind.USER, operation)
            return can_read(principal, EntityKind.USER, existing)
        case Operation.CREATE:
            if principal.role.is_admin_tier:
                return Decision.allow()
            return _deny_role(principal, operation, EntityKind.USER)
        case Operation.UPDATE:
            if existing is None:
                return _deny_missing(EntityKind.USER, operation)
            if principal.role.is_admin_tier:
                return Decision.allow()
            return _deny_role(principal, operation, EntityKind.USER)
        case Operation.DELETE:
            if existing is None:
                return _deny_missing(EntityKind.USER, operation)
            # Stricter than update: admins may edit accounts but not remove them.
            if principal.role is Role.SUPERADMIN:
                return Decision.allow()
            return _deny_role(principal, operation, EntityKind.USER)
    return _deny_unsupported(EntityKind.USER, operation)


def authorize(
    principal: Principal,
    kind: EntityKind,
    existing: Any,
    operation: Operation | str,
    *,
    dependents: int = 0,
    target_region_id: int | None = None,
    site: SiteEntity | None = None,
    new_status: ActivityStatus | str | None = None,
    assigned_site_ids: Iterable[int] | None = None,
) -> Decision:
    """Decide whether principal may perform operation on a kind entity.

    Args:
        principal: The acting principal.
        kind: Entity kind.
        existing: Current snapshot for read/update/delete/status_change; None for create.
        operation: Requested operation.
        dependents: Number of activities referencing a site (site delete only).
        target_region_id: Region of the entity being created, or the new region
            of a site being moved.
        site: The referenced site when creating an activity (region consistency).
        new_status: Requested status for a status change.
        assigned_site_ids: The conseiller's assigned sites (site reads).

    Returns:
        Decision.allow() or a Decision carrying the denial reason.
    """
    operation = Operation(operation)
    match kind:
        case EntityKind.SITE:
            decision = _authorize_site(
                principal,
                existing,
                operation,
                dependents=dependents,
                target_region_id=target_region_id,
                assigned_site_ids=assigned_site_ids,
            )
        case EntityKind.ACTIVITY:
            decision = _authorize_activity(
                principal,
                existing,
                operation,
                target_region_id=target_region_id,
                site=site,
                new_status=new_status,
            )
        case EntityKind.USER:
            decision = _authorize_user(principal, existing, operation)

    if decision.denied:
        logger.info(
            "Mutation denied: principal=%s role=%s kind=%s op=%s reason=%s",
            principal.id,
            principal.role.value,
            kind.value,
            operation.value,
            decision.reason.value if decision.reason else None,
        )
    return decision


def _authorize_activity_move(
    principal: Principal,
    existing: ActivityEntity,
    changes: Mapping[str, Any],
    site: SiteEntity | None,
) -> Decision:
    """Region and site edits: the new placement must be consistent and in scope."""
    region_id = changes.get("region_id", existing.region_id)
    site_id = changes.get("site_id", existing.site_id)
    if region_id == existing.region_id and site_id == existing.site_id:
        return Decision.allow()

    if site_id == existing.site_id:
        site_region_id = existing.region_id
    elif site is None or site.id != site_id:
        return Decision.deny(
            DenyReason.MISSING_ENTITY,
            f"Cannot move activity {existing.id} to site {site_id} without the site record",
            site_id=site_id,
        )
    else:
        site_region_id = site.region_id
    if site_region_id != region_id:
        return Decision.deny(
            DenyReason.SITE_REGION_MISMATCH,
            f"Site {site_id} belongs to region {site_region_id}, not {region_id}",
            site_id=site_id,
            site_region_id=site_region_id,
            region_id=region_id,
        )
    return _scope_decision(principal, region_id, "New activity")


def authorize_activity_update(
    principal: Principal,
    existing: ActivityEntity,
    changes: Mapping[str, Any],
    *,
    site: SiteEntity | None = None,
) -> Decision:
    """Authorize a change set that may mix business fields and a status.

    The update rule always applies, whatever the change set holds. A new
    region or site must agree with each other and stay in the principal's
    scope; site is the record of the new site_id when it changes. A status
    different from the current one also follows the workflow.

    Raises:
        ValidationException: changes names a field that cannot be edited.
    """
    unknown = sorted(set(changes) - BUSINESS_FIELDS - {"status"})
    if unknown:
        raise ValidationException(
            f"Activity fields cannot be modified: {', '.join(unknown)}",
            field=unknown[0],
        )
    decisions = [authorize(principal, EntityKind.ACTIVITY, existing, Operation.UPDATE)]
    decisions.append(_authorize_activity_move(principal, existing, changes, site))
    new_status = changes.get("status")
    if new_status is not None and coerce_status(new_status) is not existing.status:
        decisions.append(can_transition(principal, existing, new_status))
    return first_denial(*decisions)
