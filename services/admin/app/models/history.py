"""
Admin service — vehicle history (audit trail).

Tables owned by this module:
  - vehicle_history   Append-only event log per vehicle. Rows are never
                      updated or deleted by application code.
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


class VehicleHistoryEvent(Base):
    __tablename__ = "vehicle_history"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("vehicles.id", ondelete="CASCADE", name="fk_vehicle_history_vehicle_id"),
        nullable=False,
        index=True,
    )
    # The vehicle owner the event is about (admin events record the admin in metadata)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    event_type: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    event_description: Mapped[str] = mapped_column(sa.Text(), nullable=False)
    # "metadata" is reserved on declarative classes, hence the attribute rename
    event_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSONType, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
