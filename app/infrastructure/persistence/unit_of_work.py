"""SQLAlchemy unit of work: one session and one transaction per use.

Entered by application services rather than by a request dependency, so a
validate-then-write sequence reads and writes one consistent snapshot.
"""

import logging
from types import TracebackType

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.infrastructure.exceptions import PersistenceError
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.persistence.repositories import (
    ActivityRepository,
    AssignmentRepository,
    SiteRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """Async context manager implementing IUnitOfWork.

    Commits on exit only when commit() was called and no exception escaped;
    otherwise rolls back. The session is always closed.
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] | None = None
    ) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._committed = False

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        factory = self._session_factory or get_session_factory()
        self._session = factory()
        self._committed = False
        try:
            await self._session.begin()
        except SQLAlchemyError as e:
            await self._session.close()
            raise PersistenceError("begin", str(e)) from e
        self.sites = SiteRepository(self._session)
        self.activities = ActivityRepository(self._session)
        self.users = UserRepository(self._session)
        self.assignments = AssignmentRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self._session
        if session is None:
            return
        try:
            if exc_type is None and self._committed:
                await session.commit()
            else:
                await session.rollback()
        except SQLAlchemyError as e:
            logger.error("Unit of work finalization failed: %s", e, exc_info=True)
            await session.rollback()
            if exc_type is None:
                raise PersistenceError("commit", str(e)) from e
        finally:
            await session.close()
            self._session = None

    async def commit(self) -> None:
        self._committed = True
