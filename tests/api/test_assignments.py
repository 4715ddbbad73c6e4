"""HTTP tests for /api/v1/assignments against the in-memory store."""

import pytest
from httpx import AsyncClient

from app.api.v1.dependencies import get_uow_factory
from app.core.config import get_settings
from app.domain.entities import Principal
from app.infrastructure.security.jwt import create_principal_token
from app.main import app

URL = "/api/v1/assignments"


@pytest.fixture(autouse=True)
def _fake_persistence(uow_factory):
    app.dependency_overrides[get_uow_factory] = lambda: uow_factory
    yield
    app.dependency_overrides.pop(get_uow_factory, None)


def _auth(principal: Principal) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_principal_token(principal)}"}


async def test_requires_authentication(client: AsyncClient) -> None:
    response = await client.get(URL, params={"user_id": 4})
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


async def test_invalid_token_is_401(client: AsyncClient) -> None:
    response = await client.get(
        URL, params={"user_id": 4}, headers={"Authorization": "Bearer nope"}
    )
    assert response.status_code == 401


@pytest.mark.parametrize("label", ["superviseur", "conseiller"])
async def test_non_assigner_is_403(client: AsyncClient, principals, label: str) -> None:
    response = await client.put(
        URL, json={"user_id": 4, "site_ids": [10]}, headers=_auth(principals[label])
    )
    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "PERMISSION_DENIED"
    assert body["details"]["reason"] == "role_not_allowed"


async def test_replace_assignments(client: AsyncClient, store, principals) -> None:
    store.edges = {(4, 11)}
    response = await client.put(
        URL, json={"user_id": 4, "site_ids": [10]}, headers=_auth(principals["admin"])
    )
    assert response.status_code == 200
    assert response.json() == {"user_id": 4, "site_ids": [10]}
    assert store.assigned(4) == {10}


async def test_out_of_scope_is_400_and_unchanged(client: AsyncClient, store, principals) -> None:
    store.edges = {(4, 11)}
    response = await client.put(
        URL, json={"user_id": 4, "site_ids": [10, 20]}, headers=_auth(principals["admin"])
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "OUT_OF_SCOPE"
    assert body["details"]["site_ids"] == [20]
    assert body["details"]["region_ids"] == [7]
    assert store.assigned(4) == {11}


async def test_unknown_site_is_404(client: AsyncClient, principals) -> None:
    response = await client.put(
        URL, json={"user_id": 4, "site_ids": [99]}, headers=_auth(principals["superadmin"])
    )
    assert response.status_code == 404
    assert response.json()["details"]["site_ids"] == [99]


async def test_role_mismatch_is_400(client: AsyncClient, principals) -> None:
    response = await client.put(
        URL, json={"user_id": 3, "site_ids": [10]}, headers=_auth(principals["admin"])
    )
    assert response.status_code == 400
    assert response.json()["error"] == "ROLE_MISMATCH"


async def test_body_validation_is_422(client: AsyncClient, principals) -> None:
    response = await client.put(
        URL, json={"user_id": 0, "site_ids": [10]}, headers=_auth(principals["admin"])
    )
    assert response.status_code == 422


async def test_get_by_user_and_site(client: AsyncClient, store, principals) -> None:
    store.edges = {(4, 10), (4, 11)}
    headers = _auth(principals["admin"])

    by_user = await client.get(URL, params={"user_id": 4}, headers=headers)
    by_site = await client.get(URL, params={"site_id": 10}, headers=headers)

    assert by_user.json() == {"user_id": 4, "site_ids": [10, 11]}
    assert by_site.json() == {"site_id": 10, "user_ids": [4]}


async def test_get_without_filter_is_400(client: AsyncClient, principals) -> None:
    response = await client.get(URL, headers=_auth(principals["admin"]))
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_delete_assignment(client: AsyncClient, store, principals) -> None:
    store.edges = {(4, 10), (4, 11)}
    response = await client.delete(
        URL, params={"user_id": 4, "site_id": 10}, headers=_auth(principals["admin"])
    )
    assert response.status_code == 200
    assert response.json() == {"user_id": 4, "site_ids": [11]}
    assert store.assigned(4) == {11}


async def test_stale_report(client: AsyncClient, store, principals) -> None:
    store.edges = {(4, 10), (4, 20)}
    response = await client.get(
        f"{URL}/stale", params={"user_id": 4}, headers=_auth(principals["superadmin"])
    )
    assert response.status_code == 200
    assert response.json() == {
        "user_id": 4,
        "sites": [{"id": 20, "name": "Parcelle C", "region_id": 9}],
    }


async def test_cookie_credential(client: AsyncClient, store, principals) -> None:
    store.edges = {(4, 10)}
    client.cookies.set(get_settings().auth_cookie_name, create_principal_token(principals["admin"]))
    response = await client.get(URL, params={"user_id": 4})
    assert response.status_code == 200


async def test_database_failure_is_503(client: AsyncClient, store, principals) -> None:
    store.fail_reads = True
    response = await client.put(
        URL, json={"user_id": 4, "site_ids": [10]}, headers=_auth(principals["admin"])
    )
    assert response.status_code == 503
    assert response.json()["message"] == "Service temporarily unavailable"
