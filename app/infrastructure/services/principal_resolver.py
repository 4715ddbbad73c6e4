"""Resolves a request credential into a Principal (implements IPrincipalProvider)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Literal

from app.application.interfaces.services import IUnitOfWork
from app.core.config import get_settings
from app.domain.entities import Principal
from app.domain.exceptions import (
    AuthenticationException,
    InfrastructureException,
    ValidationException,
)
from app.infrastructure.exceptions import IdentityStoreError
from app.infrastructure.security.jwt import verify_token

logger = logging.getLogger(__name__)


class JwtPrincipalProvider:
    """Decodes the JWT; optionally reloads role, regions and status from the database.

    With regions_source="token" the signed claims are trusted as issued.
    With "database" the account is re-read on every request so region or
    status changes apply before the token expires.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork] | None = None,
        regions_source: Literal["token", "database"] | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._regions_source = regions_source or get_settings().principal_regions_source
        if self._regions_source == "database" and uow_factory is None:
            raise ValueError("uow_factory is required when regions_source is 'database'")

    async def get_principal(self, credential: str) -> Principal:
        try:
            payload = verify_token(credential)
            user_id = int(payload["sub"])
        except (ValueError, TypeError) as e:
            logger.info("Rejected credential: %s", e)
            raise AuthenticationException("Invalid or expired token") from e

        if self._regions_source == "database":
            return await self._load_principal(user_id)
        return self._principal_from_claims(user_id, payload)

    @staticmethod
    def _principal_from_claims(user_id: int, payload: dict[str, Any]) -> Principal:
        regions = payload.get("regions") or []
        try:
            return Principal.of(user_id, payload["role"], (int(r) for r in regions))
        except (ValidationException, ValueError, TypeError) as e:
            logger.info("Rejected token claims for user %s: %s", user_id, e)
            raise AuthenticationException("Invalid token claims") from e

    async def _load_principal(self, user_id: int) -> Principal:
        assert self._uow_factory is not None
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get_by_id(user_id)
        except InfrastructureException as e:
            logger.error("Identity lookup failed for user %s: %s", user_id, e.message)
            raise IdentityStoreError(user_id, e.message) from e
        if user is None:
            raise AuthenticationException("Account not found")
        if not user.is_active:
            logger.info("Rejected inactive account %s (%s)", user_id, user.status.value)
            raise AuthenticationException("Account is not active")
        return user.to_principal()
