"""API v1 dependencies (composition root).

Routes depend only on these, never on infrastructure directly.
"""

from app.api.v1.dependencies.auth import (
    get_current_principal,
    get_current_principal_optional,
    get_principal_provider,
)
from app.api.v1.dependencies.db import get_uow_factory
from app.api.v1.dependencies.policy import (
    get_policy_service,
    require_allowed,
    require_assigner,
)

__all__ = [
    "get_current_principal",
    "get_current_principal_optional",
    "get_policy_service",
    "get_principal_provider",
    "get_uow_factory",
    "require_allowed",
    "require_assigner",
]
