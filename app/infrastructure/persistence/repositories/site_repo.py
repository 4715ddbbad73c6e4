"""Site repository: site reads for policy decisions."""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import SiteEntity
from app.infrastructure.persistence.models.activity import Activity
from app.infrastructure.persistence.models.site import Site
from app.infrastructure.persistence.repositories.base import BaseRepository


class SiteRepository(BaseRepository[Site, SiteEntity]):
    """Sites with their assigned conseillers."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Site)

    def _to_entity(self, row: Site) -> SiteEntity:
        return SiteEntity(
            id=row.id,
            region_id=row.region_id,
            name=row.name,
            assigned_user_ids=row.assigned_user_ids,
        )

    async def get_by_ids(self, site_ids: Iterable[int]) -> list[SiteEntity]:
        ids = sorted(set(site_ids))
        if not ids:
            return []
        result = await self._execute(
            select(Site).where(Site.id.in_(ids)).order_by(Site.id), "get_by_ids"
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    async def count_activities(self, site_id: int) -> int:
        result = await self._execute(
            select(func.count(Activity.id)).where(Activity.site_id == site_id),
            "count_activities",
        )
        return int(result.scalar_one())
