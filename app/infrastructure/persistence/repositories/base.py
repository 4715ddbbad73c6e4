"""Base repository: primary-key lookup, visibility-filtered listing and
SQLAlchemyError translation."""

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from app.domain.value_objects import Predicate
from app.infrastructure.exceptions import PersistenceError
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.predicate_compiler import compile_predicate

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
EntityType = TypeVar("EntityType")


class BaseRepository(Generic[ModelType, EntityType]):
    """Base repository mapping ORM rows of model to domain entities.

    Subclasses implement _to_entity. Every statement goes through _execute so
    storage failures surface as PersistenceError, never as a bare
    SQLAlchemyError or a policy denial.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    def _to_entity(self, row: ModelType) -> EntityType:
        raise NotImplementedError

    async def _execute(self, stmt: Executable, operation: str) -> Result[Any]:
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(
                "%s.%s failed: %s", self.model.__name__, operation, e, exc_info=True
            )
            raise PersistenceError(f"{self.model.__tablename__}.{operation}", str(e)) from e

    async def get_by_id(self, entity_id: int) -> EntityType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self._execute(
            select(self.model).where(model.id == entity_id), "get_by_id"
        )
        row = result.scalar_one_or_none()
        return self._to_entity(row) if row is not None else None

    async def list_visible(
        self, predicate: Predicate, skip: int = 0, limit: int = 100
    ) -> list[EntityType]:
        """Return the records predicate allows, ordered by id, with pagination."""
        if predicate.matches_nothing:
            return []
        model: Any = self.model
        stmt = (
            select(self.model)
            .where(compile_predicate(predicate, self.model))
            .order_by(model.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self._execute(stmt, "list_visible")
        return [self._to_entity(row) for row in result.scalars().all()]
