"""Pydantic request/response schemas for the API."""

from app.schemas.assignment import (
    AssignmentErrorResponse,
    AssignSitesRequest,
    SiteAssignmentsResponse,
    SiteSummary,
    StaleAssignmentsResponse,
    UserAssignmentsResponse,
)
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

__all__ = [
    "AssignSitesRequest",
    "AssignmentErrorResponse",
    "HealthResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "SiteAssignmentsResponse",
    "SiteSummary",
    "StaleAssignmentsResponse",
    "UserAssignmentsResponse",
]
