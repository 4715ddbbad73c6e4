"""Principal: the authenticated actor of a request.

Produced by the identity collaborator on every request and passed explicitly
to every policy function; never read from ambient request state.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from app.domain.enums import Role
from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class Principal:
    """Immutable identity: user id, role and region memberships."""

    id: int
    role: Role
    region_ids: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            try:
                object.__setattr__(self, "role", Role(self.role))
            except ValueError as e:
                raise ValidationException(
                    f"Unknown role: {self.role!r}", field="role"
                ) from e
        if not isinstance(self.region_ids, frozenset):
            object.__setattr__(self, "region_ids", frozenset(self.region_ids))

    @classmethod
    def of(cls, id: int, role: Role | str, region_ids: Iterable[int] = ()) -> "Principal":
        """Convenience constructor accepting any iterable of region ids."""
        return cls(id=id, role=role, region_ids=frozenset(region_ids))

    def is_role(self, *roles: Role) -> bool:
        return self.role in roles
