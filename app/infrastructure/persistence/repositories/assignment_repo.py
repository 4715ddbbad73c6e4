"""Assignment repository: the conseiller-site link table only."""

import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.site import SiteAssignment
from app.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class AssignmentRepository(BaseRepository[SiteAssignment, None]):
    """Read and replace assignment edges. Writes flush but never commit."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, SiteAssignment)

    async def get_assigned_site_ids(self, user_id: int) -> frozenset[int]:
        result = await self._execute(
            select(SiteAssignment.site_id).where(SiteAssignment.user_id == user_id),
            "get_assigned_site_ids",
        )
        return frozenset(result.scalars().all())

    async def get_assigned_user_ids(self, site_id: int) -> frozenset[int]:
        result = await self._execute(
            select(SiteAssignment.user_id).where(SiteAssignment.site_id == site_id),
            "get_assigned_user_ids",
        )
        return frozenset(result.scalars().all())

    async def replace_assignments(self, user_id: int, site_ids: frozenset[int]) -> None:
        """Delete every edge of user_id, then insert one per site."""
        await self._execute(
            delete(SiteAssignment).where(SiteAssignment.user_id == user_id),
            "replace_assignments",
        )
        if site_ids:
            await self._execute(
                insert(SiteAssignment).values(
                    [{"user_id": user_id, "site_id": s} for s in sorted(site_ids)]
                ),
                "replace_assignments",
            )
        logger.debug("Replaced assignments of user %s: %d sites", user_id, len(site_ids))

    async def remove_assignment(self, user_id: int, site_id: int) -> bool:
        result = await self._execute(
            delete(SiteAssignment).where(
                SiteAssignment.user_id == user_id,
                SiteAssignment.site_id == site_id,
            ),
            "remove_assignment",
        )
        return bool(result.rowcount)
