"""
Admin service — moderation audit log.

Tables owned by this module:
  - moderation_audit_log   Append-only record of admin actions aimed at a
                           user rather than a vehicle (suspend / unsuspend).
                           Vehicle-scoped actions are logged to vehicle_history.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from shared.database.postgres import Base

from app.models._types import JSONType


class ModerationAuditEntry(Base):
    __tablename__ = "moderation_audit_log"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    actor_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    actor_email: Mapped[str] = mapped_column(sa.Text(), nullable=False)
    action: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    target_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    reason: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    event_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSONType, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now()
    )
