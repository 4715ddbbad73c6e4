"""Service interfaces (ports) for the application layer.

Protocols define contracts for the identity collaborator and the
transaction boundary used by policy reads and assignment writes (DIP).
"""

from __future__ import annotations

from types import TracebackType
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.interfaces.repositories import (
        IActivityRepository,
        IAssignmentRepository,
        ISiteRepository,
        IUserRepository,
    )
    from app.domain.entities import Principal


class IPrincipalProvider(Protocol):
    """Protocol for turning a request credential into a Principal."""

    async def get_principal(self, credential: str) -> Principal:
        """Return the Principal for credential.

        Raises AuthenticationException for an invalid credential or inactive
        account, InfrastructureException when the identity store fails.
        """


class IUnitOfWork(Protocol):
    """Scoped transaction around a validate-then-write sequence.

    Entering begins a transaction. Leaving commits when commit() was called
    and no exception escaped; every other exit path rolls back. All
    repositories share the transaction.
    """

    sites: ISiteRepository
    activities: IActivityRepository
    users: IUserRepository
    assignments: IAssignmentRepository

    async def __aenter__(self) -> IUnitOfWork:
        """Begin the transaction."""

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Commit if committed and no error; otherwise roll back."""

    async def commit(self) -> None:
        """Mark the unit of work for commit."""
