"""Auth dependencies: credential extraction and Principal resolution."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.v1.dependencies.db import get_uow_factory
from app.application.interfaces.services import IPrincipalProvider
from app.application.services.assignment_index import UnitOfWorkFactory
from app.core.config import get_settings
from app.domain.entities import Principal
from app.domain.exceptions import AuthenticationException
from app.infrastructure.services.principal_resolver import JwtPrincipalProvider

_http_bearer = HTTPBearer(auto_error=False)


def get_principal_provider(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> IPrincipalProvider:
    """JWT principal provider; reads the database only when configured to."""
    settings = get_settings()
    if settings.principal_regions_source == "database":
        return JwtPrincipalProvider(uow_factory, "database")
    return JwtPrincipalProvider(regions_source="token")


def _credential(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(get_settings().auth_cookie_name)


async def get_current_principal_optional(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    provider: Annotated[IPrincipalProvider, Depends(get_principal_provider)],
) -> Principal | None:
    """Return the Principal from the bearer token or auth cookie; None when absent."""
    credential = _credential(request, credentials)
    if not credential:
        return None
    return await provider.get_principal(credential)


async def get_current_principal(
    principal: Annotated[Principal | None, Depends(get_current_principal_optional)],
) -> Principal:
    """Return the Principal; raise 401 if no credential was sent."""
    if principal is None:
        raise AuthenticationException("Not authenticated")
    return principal
