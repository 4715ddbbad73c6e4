"""Entity visibility filter: which rows a principal may read.

visibility_predicate() returns a declarative Predicate for list queries;
can_read() answers the same question for one already-loaded row, so list
and detail endpoints can never disagree.

Rules:
    superadmin   sees everything.
    admin,
    superviseur  see sites and activities whose region is in scope, and users
                 sharing at least one region with them.
    conseiller   sees the sites explicitly assigned to them, the activities
                 they authored (in any region), and only their own user row.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from app.application.services.region_scope import resolve_scope
from app.domain.entities import Principal, SiteEntity
from app.domain.enums import DenyReason, EntityKind, Role
from app.domain.value_objects import (
    AllRegions,
    AnyOverlap,
    Decision,
    FieldEquals,
    FieldIn,
    MatchAll,
    MatchNone,
    Predicate,
    Scope,
)

logger = logging.getLogger(__name__)


def _region_predicate(scope: Scope, field: str) -> Predicate:
    if isinstance(scope, AllRegions):
        return MatchAll()
    if scope.is_empty:
        return MatchNone()
    return FieldIn(field, scope.region_ids)


def _site_predicate(
    principal: Principal, scope: Scope, assigned_site_ids: Iterable[int] | None
) -> Predicate:
    match principal.role:
        case Role.SUPERADMIN | Role.ADMIN | Role.SUPERVISEUR:
            return _region_predicate(scope, "region_id")
        case Role.CONSEILLER:
            if assigned_site_ids is None:
                raise ValueError(
                    "assigned_site_ids is required to build site visibility for a conseiller"
                )
            assigned = frozenset(assigned_site_ids)
            if not assigned:
                return MatchNone()
            return FieldIn("id", assigned)


def _activity_predicate(principal: Principal, scope: Scope) -> Predicate:
    match principal.role:
        case Role.SUPERADMIN | Role.ADMIN | Role.SUPERVISEUR:
            return _region_predicate(scope, "region_id")
        case Role.CONSEILLER:
            # Authorship, not region: a conseiller never sees a colleague's work.
            return FieldEquals("created_by_id", principal.id)


def _user_predicate(principal: Principal, scope: Scope) -> Predicate:
    match principal.role:
        case Role.SUPERADMIN:
            return MatchAll()
        case Role.ADMIN | Role.SUPERVISEUR:
            if scope.is_empty:
                return MatchNone()
            return AnyOverlap("region_ids", scope.region_ids)
        case Role.CONSEILLER:
            return FieldEquals("id", principal.id)


def visibility_predicate(
    principal: Principal,
    kind: EntityKind,
    assigned_site_ids: Iterable[int] | None = None,
) -> Predicate:
    """Return the read restriction for principal on entities of kind.

    Args:
        principal: The acting principal.
        kind: Entity kind being listed.
        assigned_site_ids: The conseiller's assigned sites; required only when
            a conseiller lists sites.

    Returns:
        A Predicate; MatchNone for an empty scope or assignment set.
    """
    scope = resolve_scope(principal)
    match kind:
        case EntityKind.SITE:
            return _site_predicate(principal, scope, assigned_site_ids)
        case EntityKind.ACTIVITY:
            return _activity_predicate(principal, scope)
        case EntityKind.USER:
            return _user_predicate(principal, scope)


def _read_denial(principal: Principal, kind: EntityKind, entity: Any) -> Decision:
    if principal.role is Role.CONSEILLER:
        if kind is EntityKind.SITE:
            return Decision.deny(
                DenyReason.NOT_ASSIGNED,
                "Site is not assigned to this conseiller",
                site_id=getattr(entity, "id", None),
            )
        return Decision.deny(
            DenyReason.NOT_OWNER,
            f"Conseillers may only read their own {kind.value} records",
            entity_id=getattr(entity, "id", None),
        )
    if kind is EntityKind.USER:
        return Decision.deny(
            DenyReason.REGION_OUT_OF_SCOPE,
            "User shares no region with the principal",
            user_id=getattr(entity, "id", None),
            principal_region_ids=principal.region_ids,
        )
    return Decision.deny(
        DenyReason.REGION_OUT_OF_SCOPE,
        f"{kind.value.capitalize()} region is outside the principal's regions",
        region_id=getattr(entity, "region_id", None),
        principal_region_ids=principal.region_ids,
    )


def can_read(
    principal: Principal,
    kind: EntityKind,
    entity: Any,
    assigned_site_ids: Iterable[int] | None = None,
) -> Decision:
    """Decide whether principal may read one loaded entity.

    Uses the same predicate as list queries. Reading one's own user record is
    always allowed.
    """
    if kind is EntityKind.USER and getattr(entity, "id", None) == principal.id:
        return Decision.allow()
    if (
        kind is EntityKind.SITE
        and principal.role is Role.CONSEILLER
        and assigned_site_ids is None
        and isinstance(entity, SiteEntity)
    ):
        assigned_site_ids = (
            {entity.id} if entity.is_assigned_to(principal.id) else set()
        )
    predicate = visibility_predicate(principal, kind, assigned_site_ids)
    if predicate.matches(entity):
        return Decision.allow()
    decision = _read_denial(principal, kind, entity)
    logger.info(
        "Read denied: principal=%s role=%s kind=%s reason=%s",
        principal.id,
        principal.role.value,
        kind.value,
        decision.reason.value if decision.reason else None,
    )
    return decision
