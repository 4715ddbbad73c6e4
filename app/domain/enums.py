"""Domain enumerations for the AgriTrack policy engine.

Enums represent fixed sets of domain values (roles, activity status, entity
kinds). Role is closed: every policy table matches on it exhaustively, so a
new role cannot be added without revisiting each decision path.
"""

from enum import Enum


class Role(str, Enum):
    """Principal role. Mutually exclusive: a user holds exactly one."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    SUPERVISEUR = "superviseur"
    CONSEILLER = "conseiller"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]

    @property
    def is_admin_tier(self) -> bool:
        """True for roles that may manage sites, users and assignments."""
        return self in (Role.SUPERADMIN, Role.ADMIN)


class ActivityStatus(str, Enum):
    """Activity approval status. EN_ATTENTE is initial; the others are terminal."""

    EN_ATTENTE = "en_attente"
    APPROUVE = "approuve"
    REJETE = "rejete"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]

    @property
    def is_terminal(self) -> bool:
        return self is not ActivityStatus.EN_ATTENTE


class UserStatus(str, Enum):
    """Account status. Only ACTIF accounts can authenticate."""

    ACTIF = "actif"
    INACTIF = "inactif"
    SUSPENDU = "suspendu"


class EntityKind(str, Enum):
    """Entity kinds the policy engine decides on."""

    SITE = "site"
    ACTIVITY = "activity"
    USER = "user"


class Operation(str, Enum):
    """Requested operation on an entity."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    STATUS_CHANGE = "status_change"


class DenyReason(str, Enum):
    """Machine-readable reason carried by a negative Decision."""

    ROLE_NOT_ALLOWED = "role_not_allowed"
    REGION_OUT_OF_SCOPE = "region_out_of_scope"
    NOT_ASSIGNED = "not_assigned"
    NOT_OWNER = "not_owner"
    NOT_PENDING = "not_pending"
    HAS_DEPENDENTS = "has_dependents"
    SITE_REGION_MISMATCH = "site_region_mismatch"
    ALREADY_FINALIZED = "already_finalized"
    INVALID_TRANSITION = "invalid_transition"
    MISSING_ENTITY = "missing_entity"
    UNSUPPORTED_OPERATION = "unsupported_operation"


class AssignmentErrorKind(str, Enum):
    """Precondition failures of an assignment write."""

    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    ROLE_MISMATCH = "role_mismatch"
    NO_REGION = "no_region"
    OUT_OF_SCOPE = "out_of_scope"
