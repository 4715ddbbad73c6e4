"""Infrastructure exceptions for persistence and identity operations.

Extend InfrastructureException so presentation maps them to 503
consistently, and so policy callers can tell a collaborator failure from
a denial.
"""

from app.domain.exceptions import InfrastructureException


class PersistenceError(InfrastructureException):
    """A database read or write failed (wraps SQLAlchemyError)."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Persistence operation failed: {operation}",
            collaborator="database",
            operation=operation,
        )
        self.details["reason"] = reason


class IdentityStoreError(InfrastructureException):
    """The identity collaborator could not resolve account state."""

    def __init__(self, user_id: int, reason: str) -> None:
        super().__init__(
            f"Could not load account state for user {user_id}",
            collaborator="identity",
            operation="get_principal",
        )
        self.details.update({"user_id": user_id, "reason": reason})
