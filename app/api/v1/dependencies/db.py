"""Database dependencies (composition root)."""

from __future__ import annotations

from app.application.services.assignment_index import UnitOfWorkFactory
from app.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


def get_uow_factory() -> UnitOfWorkFactory:
    """Unit-of-work factory over the SQL database; overridden in tests."""
    return SqlAlchemyUnitOfWork
