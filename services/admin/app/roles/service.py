"""
Role authority — pure business logic (zero FastAPI imports).

``has_role`` is the single source of truth for admin authorization.  It asks
the user_roles table on every call; nothing is cached across requests.
"""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from shared.constants import Role

from app.models.role import UserRole


async def has_role(session: AsyncSession, user_id: uuid.UUID, role: Role) -> bool:
    """Return whether ``user_id`` holds ``role``.

    Database errors propagate: callers must treat a failed check as a failure,
    never as a "no".
    """
    result = await session.execute(
        sa.select(
            sa.exists().where(UserRole.user_id == user_id, UserRole.role == role.value)
        )
    )
    return bool(result.scalar())


async def grant_role(session: AsyncSession, user_id: uuid.UUID, role: Role) -> bool:
    """Assign ``role``. Returns False when the user already held it."""
    if await has_role(session, user_id, role):
        return False
    session.add(UserRole(user_id=user_id, role=role.value))
    await session.flush()
    return True


async def revoke_role(session: AsyncSession, user_id: uuid.UUID, role: Role) -> bool:
    """Remove ``role``. Returns False when there was nothing to remove."""
    result = await session.execute(
        sa.delete(UserRole).where(UserRole.user_id == user_id, UserRole.role == role.value)
    )
    return result.rowcount > 0
