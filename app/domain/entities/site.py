"""Site and Region domain entities."""

from dataclasses import dataclass, field

from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class RegionEntity:
    """Administrative region (read-only reference data)."""

    id: int
    name: str


@dataclass(frozen=True)
class SiteEntity:
    """Snapshot of a site as needed by policy decisions.

    assigned_user_ids is the set of conseillers currently bound to the site.
    Validation runs on construction.
    """

    id: int
    region_id: int
    name: str = ""
    assigned_user_ids: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.region_id is None:
            raise ValidationException("Site must belong to a region", field="region_id")
        if not isinstance(self.assigned_user_ids, frozenset):
            object.__setattr__(
                self, "assigned_user_ids", frozenset(self.assigned_user_ids)
            )

    def is_assigned_to(self, user_id: int) -> bool:
        return user_id in self.assigned_user_ids
