"""Tests for JwtPrincipalProvider (token claims and database-backed modes)."""

from datetime import timedelta

import pytest

from app.core.config import get_settings
from app.domain.entities import Principal
from app.domain.enums import Role
from app.domain.exceptions import AuthenticationException, InfrastructureException
from app.infrastructure.exceptions import IdentityStoreError
from app.infrastructure.security.jwt import create_access_token, create_principal_token
from app.infrastructure.services import JwtPrincipalProvider


async def test_token_mode_trusts_claims() -> None:
    principal = Principal.of(4, Role.CONSEILLER, {7, 9})
    provider = JwtPrincipalProvider(regions_source="token")
    assert await provider.get_principal(create_principal_token(principal)) == principal


async def test_expired_token_rejected() -> None:
    token = create_principal_token(
        Principal.of(4, Role.CONSEILLER, {7}), expires_delta=timedelta(seconds=-5)
    )
    with pytest.raises(AuthenticationException) as exc_info:
        await JwtPrincipalProvider(regions_source="token").get_principal(token)
    assert exc_info.value.message == "Invalid or expired token"


async def test_garbage_token_rejected() -> None:
    with pytest.raises(AuthenticationException):
        await JwtPrincipalProvider(regions_source="token").get_principal("not-a-jwt")


async def test_missing_role_claim_rejected() -> None:
    token = create_access_token({"sub": "4"})
    with pytest.raises(AuthenticationException):
        await JwtPrincipalProvider(regions_source="token").get_principal(token)


async def test_unknown_role_claim_rejected() -> None:
    token = create_access_token({"sub": "4", "role": "inspecteur", "regions": [7]})
    with pytest.raises(AuthenticationException) as exc_info:
        await JwtPrincipalProvider(regions_source="token").get_principal(token)
    assert exc_info.value.message == "Invalid token claims"


async def test_non_numeric_subject_rejected() -> None:
    token = create_access_token({"sub": "abc", "role": "admin"})
    with pytest.raises(AuthenticationException):
        await JwtPrincipalProvider(regions_source="token").get_principal(token)


async def test_database_mode_reloads_regions(store, uow_factory) -> None:
    """Regions changed after issuance apply immediately."""
    token = create_principal_token(Principal.of(4, Role.CONSEILLER, {7}))
    store.add_user(4, Role.CONSEILLER, {9})
    provider = JwtPrincipalProvider(uow_factory, regions_source="database")
    principal = await provider.get_principal(token)
    assert principal.region_ids == {9}


async def test_database_mode_rejects_inactive_account(store, uow_factory) -> None:
    store.add_user(4, Role.CONSEILLER, {7}, status="suspendu")
    token = create_principal_token(Principal.of(4, Role.CONSEILLER, {7}))
    with pytest.raises(AuthenticationException) as exc_info:
        await JwtPrincipalProvider(uow_factory, regions_source="database").get_principal(token)
    assert exc_info.value.message == "Account is not active"


async def test_database_mode_unknown_account(uow_factory) -> None:
    token = create_principal_token(Principal.of(404, Role.ADMIN, {7}))
    with pytest.raises(AuthenticationException) as exc_info:
        await JwtPrincipalProvider(uow_factory, regions_source="database").get_principal(token)
    assert exc_info.value.message == "Account not found"


async def test_database_failure_is_infrastructure_error(store, uow_factory) -> None:
    store.fail_reads = True
    token = create_principal_token(Principal.of(4, Role.CONSEILLER, {7}))
    with pytest.raises(InfrastructureException) as exc_info:
        await JwtPrincipalProvider(uow_factory, regions_source="database").get_principal(token)
    assert isinstance(exc_info.value, IdentityStoreError)


def test_database_mode_requires_factory() -> None:
    with pytest.raises(ValueError):
        JwtPrincipalProvider(regions_source="database")


def test_source_defaults_to_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRINCIPAL_REGIONS_SOURCE", "database")
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@localhost/agritrack")
    get_settings.cache_clear()
    try:
        with pytest.raises(ValueError):
            JwtPrincipalProvider()
    finally:
        monkeypatch.undo()
        get_settings.cache_clear()
