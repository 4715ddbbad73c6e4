"""User account entity (the persisted side of a Principal)."""

from dataclasses import dataclass, field

from app.domain.entities.principal import Principal
from app.domain.enums import Role, UserStatus


@dataclass(frozen=True)
class UserEntity:
    """User account snapshot: role, region memberships and account status."""

    id: int
    role: Role
    region_ids: frozenset[int] = field(default_factory=frozenset)
    status: UserStatus = UserStatus.ACTIF
    email: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role(self.role))
        if not isinstance(self.status, UserStatus):
            object.__setattr__(self, "status", UserStatus(self.status))
        if not isinstance(self.region_ids, frozenset):
            object.__setattr__(self, "region_ids", frozenset(self.region_ids))

    @property
    def is_active(self) -> bool:
        return self.status is UserStatus.ACTIF

    def has_any_region(self, region_ids: frozenset[int]) -> bool:
        return not self.region_ids.isdisjoint(region_ids)

    def to_principal(self) -> Principal:
        return Principal(id=self.id, role=self.role, region_ids=self.region_ids)
