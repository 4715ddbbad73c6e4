"""Site assignment endpoints: read, replace and remove conseiller-site links.

Only superadmins and admins reach these routes. Refused writes come back
from the policy layer as AssignmentResult values and are mapped to 4xx here.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import get_policy_service, require_assigner
from app.application.services.policy_service import PolicyService
from app.domain.entities import Principal
from app.domain.enums import AssignmentErrorKind
from app.domain.exceptions import ValidationException
from app.domain.value_objects import AssignmentError
from app.schemas.assignment import (
    AssignmentErrorResponse,
    AssignSitesRequest,
    SiteAssignmentsResponse,
    SiteSummary,
    StaleAssignmentsResponse,
    UserAssignmentsResponse,
)

router = APIRouter()

_ERROR_STATUS: dict[AssignmentErrorKind, int] = {
    AssignmentErrorKind.FORBIDDEN: 403,
    AssignmentErrorKind.NOT_FOUND: 404,
    AssignmentErrorKind.ROLE_MISMATCH: 400,
    AssignmentErrorKind.NO_REGION: 400,
    AssignmentErrorKind.OUT_OF_SCOPE: 400,
}

_ERROR_RESPONSES = {
    400: {"model": AssignmentErrorResponse},
    403: {"model": AssignmentErrorResponse},
    404: {"model": AssignmentErrorResponse},
}


def _error_response(error: AssignmentError) -> JSONResponse:
    body = AssignmentErrorResponse(
        error=error.kind.value.upper(),
        message=error.message,
        details=error.to_dict(),
    )
    return JSONResponse(status_code=_ERROR_STATUS[error.kind], content=body.model_dump())


@router.get("", response_model=UserAssignmentsResponse | SiteAssignmentsResponse)
async def get_assignments(
    _: Annotated[Principal, Depends(require_assigner)],
    policy: Annotated[PolicyService, Depends(get_policy_service)],
    user_id: Annotated[int | None, Query(gt=0)] = None,
    site_id: Annotated[int | None, Query(gt=0)] = None,
) -> UserAssignmentsResponse | SiteAssignmentsResponse:
    """Sites assigned to user_id, or users assigned to site_id."""
    if user_id is not None:
        site_ids = await policy.assigned_sites(user_id)
        return UserAssignmentsResponse(user_id=user_id, site_ids=sorted(site_ids))
    if site_id is not None:
        user_ids = await policy.assignments.assigned_users(site_id)
        return SiteAssignmentsResponse(site_id=site_id, user_ids=sorted(user_ids))
    raise ValidationException("user_id or site_id is required", field="user_id")


@router.get("/stale", response_model=StaleAssignmentsResponse)
async def get_stale_assignments(
    _: Annotated[Principal, Depends(require_assigner)],
    policy: Annotated[PolicyService, Depends(get_policy_service)],
    user_id: Annotated[int, Query(gt=0)],
) -> StaleAssignmentsResponse:
    """Assigned sites that are no longer in the conseiller's regions."""
    sites = await policy.find_out_of_scope_assignments(user_id)
    return StaleAssignmentsResponse(
        user_id=user_id,
        sites=[SiteSummary.model_validate(s) for s in sites],
    )


@router.put(
    "",
    response_model=UserAssignmentsResponse,
    responses=_ERROR_RESPONSES,
)
async def replace_assignments(
    body: AssignSitesRequest,
    principal: Annotated[Principal, Depends(require_assigner)],
    policy: Annotated[PolicyService, Depends(get_policy_service)],
) -> UserAssignmentsResponse | JSONResponse:
    """Replace the conseiller's assignments with body.site_ids."""
    result = await policy.assign_sites(principal, body.user_id, body.site_ids)
    if result.error is not None:
        return _error_response(result.error)
    return UserAssignmentsResponse(user_id=body.user_id, site_ids=sorted(result.site_ids))


@router.delete(
    "",
    response_model=UserAssignmentsResponse,
    responses=_ERROR_RESPONSES,
)
async def remove_assignment(
    principal: Annotated[Principal, Depends(require_assigner)],
    policy: Annotated[PolicyService, Depends(get_policy_service)],
    user_id: Annotated[int, Query(gt=0)],
    site_id: Annotated[int, Query(gt=0)],
) -> UserAssignmentsResponse | JSONResponse:
    """Remove one assignment; succeeds when it was already absent."""
    result = await policy.unassign_site(principal, user_id, site_id)
    if result.error is not None:
        return _error_response(result.error)
    return UserAssignmentsResponse(user_id=user_id, site_ids=sorted(result.site_ids))
