"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    ActivityEntity,
    Principal,
    RegionEntity,
    SiteEntity,
    UserEntity,
)
from app.domain.enums import (
    ActivityStatus,
    DenyReason,
    EntityKind,
    Operation,
    Role,
    UserStatus,
)
from app.domain.exceptions import (
    AgriTrackException,
    AuthenticationException,
    AuthorizationException,
    InfrastructureException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import Decision, Predicate, Scope

__all__ = [
    # Entities
    "ActivityEntity",
    "Principal",
    "RegionEntity",
    "SiteEntity",
    "UserEntity",
    # Enums
    "ActivityStatus",
    "DenyReason",
    "EntityKind",
    "Operation",
    "Role",
    "UserStatus",
    # Exceptions
    "AgriTrackException",
    "AuthenticationException",
    "AuthorizationException",
    "InfrastructureException",
    "ResourceNotFoundException",
    "ValidationException",
    # Value objects
    "Decision",
    "Predicate",
    "Scope",
]
