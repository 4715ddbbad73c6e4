"""Policy dependencies: the PolicyService facade and the Decision gate."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.api.v1.dependencies.auth import get_current_principal
from app.api.v1.dependencies.db import get_uow_factory
from app.application.services.assignment_index import ASSIGNER_ROLES, UnitOfWorkFactory
from app.application.services.policy_service import PolicyService
from app.domain.entities import Principal
from app.domain.enums import DenyReason
from app.domain.exceptions import AuthorizationException
from app.domain.value_objects import Decision


def get_policy_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> PolicyService:
    return PolicyService(uow_factory)


def require_allowed(decision: Decision) -> None:
    """Raise AuthorizationException (403) when decision is a denial."""
    if decision.denied:
        raise AuthorizationException.from_decision(decision)


async def require_assigner(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Require a superadmin or admin principal (assignment management)."""
    if principal.role not in ASSIGNER_ROLES:
        require_allowed(
            Decision.deny(
                DenyReason.ROLE_NOT_ALLOWED,
                "Only superadmins and admins may manage site assignments",
                role=principal.role.value,
            )
        )
    return principal
