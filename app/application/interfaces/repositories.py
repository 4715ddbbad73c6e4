"""Repository interfaces (ports) for the application layer.

Protocols define contracts that the persistence collaborator must fulfill (DIP).
All types reference domain entities only; no infrastructure imports.
Implementations raise InfrastructureException on storage failure.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.entities import ActivityEntity, SiteEntity, UserEntity


class ISiteRepository(Protocol):
    """Protocol for site reads needed by policy decisions."""

    async def get_by_id(self, site_id: int) -> SiteEntity | None:
        """Return site by ID, or None."""

    async def get_by_ids(self, site_ids: Iterable[int]) -> list[SiteEntity]:
        """Return the sites that exist among site_ids (missing ids are omitted)."""

    async def count_activities(self, site_id: int) -> int:
        """Return the number of activities referencing the site."""


class IActivityRepository(Protocol):
    """Protocol for activity reads needed by policy decisions."""

    async def get_by_id(self, activity_id: int) -> ActivityEntity | None:
        """Return activity by ID, or None."""


class IUserRepository(Protocol):
    """Protocol for user account reads (role, regions, status)."""

    async def get_by_id(self, user_id: int) -> UserEntity | None:
        """Return user by ID, or None."""

    async def list_region_ids(self, user_id: int) -> frozenset[int]:
        """Return the user's current region memberships (empty if none or unknown)."""


class IAssignmentRepository(Protocol):
    """Protocol for the conseiller ↔ site assignment relation."""

    async def get_assigned_site_ids(self, user_id: int) -> frozenset[int]:
        """Return site ids assigned to the user; empty set when none."""

    async def get_assigned_user_ids(self, site_id: int) -> frozenset[int]:
        """Return user ids assigned to the site; empty set when none."""

    async def replace_assignments(self, user_id: int, site_ids: frozenset[int]) -> None:
        """Make site_ids the user's entire assignment set (removes all others)."""

    async def remove_assignment(self, user_id: int, site_id: int) -> bool:
        """Remove one edge; return True if it existed."""
