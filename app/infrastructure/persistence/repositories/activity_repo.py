"""Activity repository: activity snapshots for policy decisions."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import ActivityEntity
from app.infrastructure.persistence.models.activity import Activity
from app.infrastructure.persistence.repositories.base import BaseRepository


class ActivityRepository(BaseRepository[Activity, ActivityEntity]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Activity)

    def _to_entity(self, row: Activity) -> ActivityEntity:
        return ActivityEntity(
            id=row.id,
            region_id=row.region_id,
            site_id=row.site_id,
            created_by_id=row.created_by_id,
            status=row.status,
        )
