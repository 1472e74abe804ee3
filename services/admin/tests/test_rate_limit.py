from app.admin import router as admin_router
from app.config import Settings

from conftest import ENDPOINT, auth_headers


async def test_rate_limit_envelope(client, super_admin, monkeypatch) -> None:
    monkeypatch.setattr(admin_router, "get_settings", lambda: Settings(rate_limit="2/minute"))

    for _ in range(2):
        ok = await client.post(ENDPOINT, json={"type": "overview"}, headers=auth_headers())
        assert ok.status_code == 200

    limited = await client.post(ENDPOINT, json={"type": "overview"}, headers=auth_headers())
    assert limited.status_code == 429
    body = limited.json()
    assert body["success"] is False
    assert body["errorCode"] == "RATE_LIMITED"


async def test_cors_preflight(client) -> None:
    response = await client.options(
        ENDPOINT,
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, content-type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
