"""Application services: region scope, visibility, mutation authorization,
activity workflow, assignment index and the policy facade."""

from app.application.services.activity_workflow import (
    ALLOWED_TRANSITIONS,
    REVIEWER_ROLES,
    can_transition,
    next_statuses,
)
from app.application.services.assignment_index import AssignmentIndex
from app.application.services.mutation_authorizer import (
    authorize,
    authorize_activity_update,
)
from app.application.services.policy_service import PolicyService
from app.application.services.region_scope import resolve_scope
from app.application.services.visibility import can_read, visibility_predicate

__all__ = [
    "ALLOWED_TRANSITIONS",
    "AssignmentIndex",
    "PolicyService",
    "REVIEWER_ROLES",
    "authorize",
    "authorize_activity_update",
    "can_read",
    "can_transition",
    "next_statuses",
    "resolve_scope",
    "visibility_predicate",
]
