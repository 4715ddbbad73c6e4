"""User repository: account role, status and region memberships."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import UserEntity
from app.infrastructure.persistence.models.user import User, UserRegion
from app.infrastructure.persistence.repositories.base import BaseRepository


class UserRepository(BaseRepository[User, UserEntity]):
    """Users with their regions (loaded eagerly)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    def _to_entity(self, row: User) -> UserEntity:
        return UserEntity(
            id=row.id,
            role=row.role,
            region_ids=row.region_ids,
            status=row.status,
            email=row.email,
        )

    async def list_region_ids(self, user_id: int) -> frozenset[int]:
        result = await self._execute(
            select(UserRegion.region_id).where(UserRegion.user_id == user_id),
            "list_region_ids",
        )
        return frozenset(result.scalars().all())
