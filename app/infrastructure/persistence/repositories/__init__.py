"""Persistence repositories: one per aggregate, mapping rows to domain entities."""

from app.infrastructure.persistence.repositories.activity_repo import ActivityRepository
from app.infrastructure.persistence.repositories.assignment_repo import (
    AssignmentRepository,
)
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.site_repo import SiteRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "ActivityRepository",
    "AssignmentRepository",
    "BaseRepository",
    "SiteRepository",
    "UserRepository",
]
