"""
Identity provider adapter — async httpx calls to the Supabase GoTrue admin API.

Used only to turn opaque user ids into display emails for admin listings.
Lookups are best-effort: any transport or HTTP failure is logged and reported
as "unknown" (None) so one missing account never breaks a whole page.
Authorization never consults this module.
"""
from __future__ import annotations

import logging
import uuid
from typing import Protocol

import httpx
from fastapi import Request

from app.config import Settings, get_settings
from shared.exceptions import ConfigError

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    async def get_user_email(self, user_id: uuid.UUID) -> str | None: ...


class SupabaseIdentityProvider:
    def __init__(self, client: httpx.AsyncClient, base_url: str, service_key: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
        }

    async def get_user_email(self, user_id: uuid.UUID) -> str | None:
        url = f"{self._base_url}/auth/v1/admin/users/{user_id}"
        try:
            r = await self._client.get(url, headers=self._headers)
        except httpx.HTTPError as exc:
            logger.warning("Identity lookup failed for %s: %s", user_id, exc)
            return None
        if r.status_code == 404:
            return None
        if r.status_code >= 400:
            logger.warning("Identity lookup error %s for %s: %s", r.status_code, user_id, r.text[:300])
            return None
        try:
            data = r.json()
        except ValueError:
            logger.warning("Identity lookup for %s returned a non-JSON body: %s", user_id, r.text[:300])
            return None
        if not isinstance(data, dict):
            return None
        return data.get("email") or None


def get_identity_provider(request: Request) -> IdentityProvider:
    """FastAPI dependency: build the adapter around the app-wide HTTP client."""
    settings: Settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_role_key:
        logger.error(
            "[%s] SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY are not configured",
            getattr(request.state, "request_id", None),
        )
        raise ConfigError()
    return SupabaseIdentityProvider(
        request.app.state.http_client,
        settings.supabase_url,
        settings.supabase_service_role_key,
    )
