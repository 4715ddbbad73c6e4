"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.activity import Activity
from app.infrastructure.persistence.models.mixins import IntIdMixin, TimestampMixin
from app.infrastructure.persistence.models.region import Region
from app.infrastructure.persistence.models.site import Site, SiteAssignment
from app.infrastructure.persistence.models.user import User, UserRegion

__all__ = [
    "Activity",
    "IntIdMixin",
    "Region",
    "Site",
    "SiteAssignment",
    "TimestampMixin",
    "User",
    "UserRegion",
]
