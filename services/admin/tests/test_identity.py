import uuid
from decimal import Decimal

import httpx
import pytest

from app.identity.client import SupabaseIdentityProvider, get_identity_provider
from app.main import app
from app.models import VehicleListing

from conftest import ENDPOINT, add_vehicle, auth_headers, ts

USER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000b7")


def _provider(handler) -> tuple[SupabaseIdentityProvider, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseIdentityProvider(client, "https://idp.test/", "service-key"), client


async def test_lookup_sends_service_credentials() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": str(USER_ID), "email": "owner@vindoc.test"})

    provider, client = _provider(handler)
    async with client:
        assert await provider.get_user_email(USER_ID) == "owner@vindoc.test"

    (request,) = seen
    assert request.method == "GET"
    assert str(request.url) == f"https://idp.test/auth/v1/admin/users/{USER_ID}"
    assert request.headers["apikey"] == "service-key"
    assert request.headers["Authorization"] == "Bearer service-key"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, json={"msg": "User not found"}),
        httpx.Response(500, text="upstream exploded"),
        httpx.Response(503, json={"error": "unavailable"}),
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json=[]),
        httpx.Response(200, content=b"null", headers={"Content-Type": "application/json"}),
        httpx.Response(200, json="owner@vindoc.test"),
        httpx.Response(200, json={}),
        httpx.Response(200, json={"email": ""}),
    ],
    ids=[
        "not-found", "server-error", "unavailable", "html-body",
        "list-body", "null-body", "string-body", "no-email", "empty-email",
    ],
)
async def test_unusable_responses_yield_no_email(response) -> None:
    provider, client = _provider(lambda request: response)
    async with client:
        assert await provider.get_user_email(USER_ID) is None


async def test_transport_failure_yields_no_email() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider, client = _provider(handler)
    async with client:
        assert await provider.get_user_email(USER_ID) is None


async def test_garbled_identity_response_shows_unknown_owner(client, super_admin, db) -> None:
    owner = uuid.uuid4()
    vehicle = await add_vehicle(db, owner, "TN10AB0001", maker_model="CRETA")
    db.add(
        VehicleListing(
            vehicle_id=vehicle.id, user_id=owner, expected_price=Decimal("700000"),
            created_at=ts(1), updated_at=ts(1),
        )
    )
    await db.commit()

    provider, http = _provider(lambda request: httpx.Response(200, text="<html>oops</html>"))
    app.dependency_overrides[get_identity_provider] = lambda: provider
    async with http:
        response = await client.post(ENDPOINT, json={"type": "listings"}, headers=auth_headers())

    assert response.status_code == 200, response.text
    (item,) = response.json()["listings"]
    assert item["userEmail"] == "Unknown"
