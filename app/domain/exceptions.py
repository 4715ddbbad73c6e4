"""Domain exceptions for the AgriTrack application.

Policy outcomes (Decision, AssignmentResult) are returned as values and never
raised. The exceptions below cover what is not a policy decision: bad input,
failed authentication, collaborator failures, and the request-boundary
translation of a negative decision. Presentation layer maps them to HTTP
responses in exception handlers.
"""

from typing import Any


class AgriTrackException(Exception):
    """Base exception for all AgriTrack application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AgriTrackException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(AgriTrackException):
    """Raised when a credential cannot be turned into a Principal."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(AgriTrackException):
    """Raised at the request boundary when a policy Decision is a denial.

    The policy engine itself never raises this; handlers build it from a
    Decision with from_decision() so the denial reason reaches the client.
    """

    def __init__(
        self,
        reason: str | None = None,
        message: str = "Permission denied",
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with optional reason code, message and details.

        Args:
            reason: DenyReason value (e.g. 'region_out_of_scope').
            message: Human-readable explanation of the denial.
            details: Context such as the mismatched region.
        """
        merged: dict[str, Any] = dict(details or {})
        if reason:
            merged["reason"] = reason
        super().__init__(message, "PERMISSION_DENIED", merged)

    @classmethod
    def from_decision(cls, decision: Any) -> "AuthorizationException":
        """Build from a denied Decision (reason, message and details carried over)."""
        reason = decision.reason.value if decision.reason else None
        return cls(reason=reason, message=decision.message, details=decision.details)


class ResourceNotFoundException(AgriTrackException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: int | str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'site', 'activity').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InfrastructureException(AgriTrackException):
    """Raised when the persistence or identity collaborator fails.

    Never a policy decision: callers must not mistake "the database is down"
    for "this is forbidden". Mapped to a generic 503 at the request boundary.
    """

    def __init__(
        self,
        message: str = "Infrastructure failure",
        collaborator: str | None = None,
        operation: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if collaborator:
            details["collaborator"] = collaborator
        if operation:
            details["operation"] = operation
        super().__init__(message, "INFRASTRUCTURE_ERROR", details)


class SqlNotConfiguredException(InfrastructureException):
    """Raised when an operation requires the SQL database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            collaborator="persistence",
        )
