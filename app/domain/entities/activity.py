"""Activity domain entity.

An activity is a unit of field work recorded at a site, subject to approval.
"""

from dataclasses import dataclass

from app.domain.enums import ActivityStatus
from app.domain.exceptions import ValidationException

# Fields a creator or reviewer may edit; everything else on the row is
# either identity (id, created_by_id) or workflow state (status).
BUSINESS_FIELDS: frozenset[str] = frozenset(
    {
        "type",
        "theme",
        "duration",
        "region_id",
        "site_id",
        "geolocation",
        "beneficiaries",
        "photos",
        "comments",
    }
)


@dataclass(frozen=True)
class ActivityEntity:
    """Snapshot of an activity as needed by policy decisions."""

    id: int
    region_id: int
    site_id: int
    created_by_id: int
    status: ActivityStatus = ActivityStatus.EN_ATTENTE

    def __post_init__(self) -> None:
        if not isinstance(self.status, ActivityStatus):
            try:
                object.__setattr__(self, "status", ActivityStatus(self.status))
            except ValueError as e:
                raise ValidationException(
                    f"Unknown activity status: {self.status!r}", field="status"
                ) from e

    @property
    def is_pending(self) -> bool:
        return self.status is ActivityStatus.EN_ATTENTE

    @property
    def is_finalized(self) -> bool:
        return self.status.is_terminal

    def was_created_by(self, user_id: int) -> bool:
        return self.created_by_id == user_id
