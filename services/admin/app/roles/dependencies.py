"""
Role authority — FastAPI dependencies.

Authentication (bearer token) comes from shared; authorization is a database
lookup against user_roles, never a claim inside the token.
"""
from __future__ import annotations

import logging

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.auth.dependencies import get_current_user_required
from shared.constants import Role
from shared.models.user import CurrentUser

from app.database import get_db
from app.exceptions import Forbidden, RoleCheckFailed
from app.roles.service import has_role

logger = logging.getLogger(__name__)


async def require_super_admin(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user_required),
    session: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Raise 403 unless the authenticated user holds SUPER_ADMIN; 500 if the check fails."""
    request_id = getattr(request.state, "request_id", None)
    try:
        allowed = await has_role(session, current_user.id, Role.SUPER_ADMIN)
    except SQLAlchemyError as exc:
        logger.error("[%s] Role check error: %s", request_id, exc)
        raise RoleCheckFailed() from exc
    if not allowed:
        logger.info(
            "[%s] Access denied for user %s - no super_admin role", request_id, current_user.email
        )
        raise Forbidden()
    logger.info("[%s] Admin access granted for %s", request_id, current_user.email)
    return current_user
