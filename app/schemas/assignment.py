"""Site assignment API schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AssignSitesRequest(BaseModel):
    """Request body for PUT /assignments: the conseiller's complete site set."""

    user_id: int = Field(..., gt=0)
    site_ids: list[int] = Field(default_factory=list)


class UserAssignmentsResponse(BaseModel):
    """Sites assigned to one user."""

    user_id: int
    site_ids: list[int]


class SiteAssignmentsResponse(BaseModel):
    """Users assigned to one site."""

    site_id: int
    user_ids: list[int]


class SiteSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    region_id: int


class StaleAssignmentsResponse(BaseModel):
    """Assigned sites outside the conseiller's current regions (report only)."""

    user_id: int
    sites: list[SiteSummary]


class AssignmentErrorResponse(BaseModel):
    """Refused assignment write."""

    error: str = Field(..., description="Assignment error kind, upper case")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
