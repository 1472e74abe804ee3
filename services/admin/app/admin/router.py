"""
Admin domain — the admin console's single data endpoint.

Routes:
  POST  /api/v1/admin-data    Dispatch on body["type"] (reads and moderation)

Order of checks: bearer token → super_admin role → JSON body → action
whitelist → per-action validation → handler.  Requires: SUPER_ADMIN role.
"""
import asyncio
import json
import logging
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.admin.controller import ActionContext, dispatch, parse_action_type
from app.config import Settings, get_settings
from app.database import get_db, get_session_factory
from app.exceptions import InvalidJSON, RequestTimeout
from app.identity.client import IdentityProvider, get_identity_provider
from app.rate_limit import limiter
from app.roles.dependencies import require_super_admin
from shared.exceptions import ApiError
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


def _rate_limit() -> str:
    return get_settings().rate_limit


async def _read_json(request: Request) -> object:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise InvalidJSON() from None


@router.post(
    "/admin-data",
    summary="[Super Admin] Aggregates, paginated listings and moderation actions",
    description=(
        "Body: `{\"type\": <action>, ...}`. Reads: overview, users, activity, vehicles, "
        "transfers, claims, listings (optional `page`, `pageSize`), get_vehicle_for_claim. "
        "Moderation: suspend_user, unsuspend_user, set_vehicle_verification, "
        "update_claim_status, update_listing_status. "
        "Responds `{success: true, ...}` or `{success: false, error, errorCode}`."
    ),
)
@limiter.limit(_rate_limit)
async def admin_data(
    request: Request,
    admin: CurrentUser = Depends(require_super_admin),
    session: AsyncSession = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    started = time.monotonic()

    body = await _read_json(request)
    action_type = parse_action_type(body)
    ctx = ActionContext(
        session=session,
        session_factory=get_session_factory(),
        identity=identity,
        admin=admin,
        request_id=request_id,
        batch_size=settings.enrichment_batch_size,
    )
    try:
        payload = await asyncio.wait_for(
            dispatch(ctx, action_type, body),
            timeout=settings.request_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error(
            "[%s] %s timed out after %dms",
            request_id, action_type.value, (time.monotonic() - started) * 1000,
        )
        raise RequestTimeout() from None
    except ApiError as exc:
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s failed after %dms: %s (cause: %r)",
                request_id, action_type.value, (time.monotonic() - started) * 1000,
                exc.detail, exc.__cause__,
            )
        raise

    logger.info(
        "[%s] %s completed in %dms for %s",
        request_id, action_type.value, (time.monotonic() - started) * 1000, admin.email,
    )
    return JSONResponse({"success": True, **payload})
