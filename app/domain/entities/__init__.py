"""Domain entities.

Pure domain models; no ORM or persistence concerns. These are the snapshots
the policy engine reads to make a decision.
"""

from app.domain.entities.activity import BUSINESS_FIELDS, ActivityEntity
from app.domain.entities.principal import Principal
from app.domain.entities.site import RegionEntity, SiteEntity
from app.domain.entities.user import UserEntity

__all__ = [
    "ActivityEntity",
    "BUSINESS_FIELDS",
    "Principal",
    "RegionEntity",
    "SiteEntity",
    "UserEntity",
]
