import uuid
from datetime import timedelta

import pytest
import sqlalchemy as sa

from app.admin.controller import ActionType
from app.config import Settings
from app.database import get_db
from app.identity import client as identity_client
from app.identity.client import get_identity_provider
from app.main import app
from shared.auth.config import AuthSettings
from shared.auth.dependencies import get_auth_settings

from conftest import ADMIN_ID, ENDPOINT, auth_headers, make_token


async def test_health(client) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "admin"}


async def test_missing_header_is_rejected_before_any_database_work(client) -> None:
    touched = []

    async def tracking_db():
        touched.append(True)
        yield None

    app.dependency_overrides[get_db] = tracking_db
    response = await client.post(ENDPOINT, json={"type": "overview"})

    assert response.status_code == 401
    body = response.json()
    assert body == {"success": False, "error": "Unauthorized", "errorCode": "AUTH_MISSING"}
    assert touched == []


async def test_non_bearer_scheme_counts_as_missing(client) -> None:
    response = await client.post(
        ENDPOINT, json={"type": "overview"}, headers={"Authorization": "Basic abc"}
    )
    assert response.status_code == 401
    assert response.json()["errorCode"] == "AUTH_MISSING"


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        make_token(secret="some-other-secret-entirely"),
        make_token(expires_in=timedelta(minutes=-5)),
        make_token(audience="anon"),
    ],
    ids=["garbage", "wrong-secret", "expired", "wrong-audience"],
)
async def test_invalid_token(client, token) -> None:
    response = await client.post(
        ENDPOINT, json={"type": "overview"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.json()["errorCode"] == "AUTH_INVALID"


async def test_missing_jwt_secret_is_config_error(client) -> None:
    app.dependency_overrides[get_auth_settings] = lambda: AuthSettings(secret="")
    response = await client.post(ENDPOINT, json={"type": "overview"}, headers=auth_headers())
    assert response.status_code == 500
    assert response.json()["errorCode"] == "CONFIG_ERROR"


@pytest.mark.parametrize("action", [a.value for a in ActionType])
async def test_authenticated_non_admin_is_forbidden_for_every_action(client, action) -> None:
    headers = auth_headers(uuid.uuid4(), "someone@vindoc.test")
    response = await client.post(ENDPOINT, json={"type": action}, headers=headers)
    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "error": "Forbidden - Admin access required",
        "errorCode": "FORBIDDEN",
    }


async def test_role_lookup_failure_is_not_treated_as_forbidden(client, db) -> None:
    await db.execute(sa.text("DROP TABLE user_roles"))
    await db.commit()

    response = await client.post(ENDPOINT, json={"type": "overview"}, headers=auth_headers())
    assert response.status_code == 500
    assert response.json()["errorCode"] == "ROLE_CHECK_FAILED"


async def test_super_admin_is_let_through(client, super_admin) -> None:
    response = await client.post(ENDPOINT, json={"type": "overview"}, headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["success"] is True


async def test_request_id_is_echoed(client, super_admin) -> None:
    response = await client.post(
        ENDPOINT,
        json={"type": "overview"},
        headers={**auth_headers(), "X-Request-ID": "req-123"},
    )
    assert response.headers["X-Request-ID"] == "req-123"


async def test_role_from_another_user_does_not_leak(client, super_admin) -> None:
    headers = auth_headers(uuid.UUID(int=ADMIN_ID.int + 1), "neighbour@vindoc.test")
    response = await client.post(ENDPOINT, json={"type": "users"}, headers=headers)
    assert response.status_code == 403


async def test_unsafe_request_id_is_replaced(client, super_admin) -> None:
    response = await client.post(
        ENDPOINT,
        json={"type": "overview"},
        headers={**auth_headers(), "X-Request-ID": "bad id with spaces"},
    )
    assert response.headers["X-Request-ID"] != "bad id with spaces"
    assert len(response.headers["X-Request-ID"]) == 12


async def test_identity_provider_requires_service_credentials(client, super_admin, monkeypatch) -> None:
    monkeypatch.setattr(identity_client, "get_settings", lambda: Settings(supabase_url="", supabase_service_role_key=""))
    app.dependency_overrides.pop(get_identity_provider)

    response = await client.post(ENDPOINT, json={"type": "overview"}, headers=auth_headers())
    assert response.status_code == 500
    assert response.json()["errorCode"] == "CONFIG_ERROR"
