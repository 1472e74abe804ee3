"""
Admin service — user suspensions.

Tables owned by this module:
  - user_suspensions   At most one row per user (UNIQUE user_id). Presence of a
                       row means the user is blocked from sensitive features.
"""
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from shared.database.postgres import Base


class UserSuspension(Base):
    __tablename__ = "user_suspensions"
    # One suspension per user; suspend_user maps a violation to ALREADY_SUSPENDED
    __table_args__ = (sa.UniqueConstraint("user_id", name="uq_user_suspensions_user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    suspended_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    reason: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    suspended_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now()
    )
