"""Activity approval workflow: state machine and transition authorization.

    en_attente ──► approuve
         └───────► rejete

approuve and rejete are terminal: there is no un-approve. A transition
attempt on a terminal activity is Deny(ALREADY_FINALIZED), never a silent
no-op, so callers can tell "already decided" from "nothing to do".
"""

from __future__ import annotations

import logging

from app.application.services.region_scope import resolve_scope
from app.domain.entities import ActivityEntity, Principal
from app.domain.enums import ActivityStatus, DenyReason, Role
from app.domain.exceptions import ValidationException
from app.domain.value_objects import Decision

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[ActivityStatus, frozenset[ActivityStatus]] = {
    ActivityStatus.EN_ATTENTE: frozenset(
        {ActivityStatus.APPROUVE, ActivityStatus.REJETE}
    ),
    ActivityStatus.APPROUVE: frozenset(),
    ActivityStatus.REJETE: frozenset(),
}

REVIEWER_ROLES: frozenset[Role] = frozenset(
    {Role.SUPERADMIN, Role.ADMIN, Role.SUPERVISEUR}
)


def next_statuses(status: ActivityStatus) -> frozenset[ActivityStatus]:
    """Return the statuses reachable from status in one transition."""
    return ALLOWED_TRANSITIONS[status]


def coerce_status(new_status: ActivityStatus | str) -> ActivityStatus:
    if isinstance(new_status, ActivityStatus):
        return new_status
    try:
        return ActivityStatus(new_status)
    except ValueError as e:
        raise ValidationException(
            f"Unknown activity status: {new_status!r}. "
            f"Expected one of {ActivityStatus.values()}",
            field="status",
        ) from e


def _reviewer_decision(principal: Principal, activity: ActivityEntity) -> Decision:
    """Check that principal may review this particular activity."""
    match principal.role:
        case Role.SUPERADMIN:
            return Decision.allow()
        case Role.ADMIN:
            if resolve_scope(principal).includes(activity.region_id):
                return Decision.allow()
            return Decision.deny(
                DenyReason.REGION_OUT_OF_SCOPE,
                "Activity region is outside the administrator's regions",
                region_id=activity.region_id,
                principal_region_ids=principal.region_ids,
            )
        case Role.SUPERVISEUR:
            # The superviseur's own region set, never a broader admin scope.
            if activity.region_id in principal.region_ids:
                return Decision.allow()
            return Decision.deny(
                DenyReason.REGION_OUT_OF_SCOPE,
                "Superviseurs may only review activities of their own regions",
                region_id=activity.region_id,
                principal_region_ids=principal.region_ids,
            )
        case Role.CONSEILLER:
            return Decision.deny(
                DenyReason.ROLE_NOT_ALLOWED,
                "Only administrators and superviseurs may change an activity status",
                role=principal.role.value,
            )


def can_transition(
    principal: Principal,
    activity: ActivityEntity,
    new_status: ActivityStatus | str,
) -> Decision:
    """Decide whether principal may move activity to new_status.

    Raises:
        ValidationException: If new_status is not a known status value.
    """
    target = coerce_status(new_status)
    if activity.is_finalized:
        decision = Decision.deny(
            DenyReason.ALREADY_FINALIZED,
            f"Activity {activity.id} is already {activity.status.value}",
            activity_id=activity.id,
            status=activity.status.value,
        )
    elif target not in next_statuses(activity.status):
        decision = Decision.deny(
            DenyReason.INVALID_TRANSITION,
            f"Cannot move activity from {activity.status.value} to {target.value}",
            activity_id=activity.id,
            status=activity.status.value,
            requested_status=target.value,
        )
    else:
        decision = _reviewer_decision(principal, activity)

    if decision.denied:
        logger.info(
            "Transition denied: principal=%s activity=%s %s->%s reason=%s",
            principal.id,
            activity.id,
            activity.status.value,
            target.value,
            decision.reason.value if decision.reason else None,
        )
    return decision
