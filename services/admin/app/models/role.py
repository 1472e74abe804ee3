"""
Admin service — role assignments.

Tables owned by this module:
  - user_roles   (user_id, role) pairs; the only source of admin authorization
"""
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from shared.constants import Role
from shared.database.postgres import Base


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_id_role"),
        sa.CheckConstraint(
            "role IN ({})".format(", ".join(f"'{r.value}'" for r in Role)),
            name="ck_user_roles_role",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Identity-provider user id; no FK because auth users live outside this database
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    role: Mapped[str] = mapped_column(sa.String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now()
    )
