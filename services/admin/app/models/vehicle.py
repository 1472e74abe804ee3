"""
Admin service — SQLAlchemy ORM models for vehicles and their documents.

Tables owned by this module:
  - vehicles    One row per registered vehicle, owned by exactly one user
  - documents   Uploaded files attached to a vehicle
"""
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from shared.database.postgres import Base


class Vehicle(Base):
    """
    A registered vehicle.

    Only the verification fields (is_verified, verified_at) are ever written by
    the admin service; everything else belongs to the owner-facing app.
    """

    __tablename__ = "vehicles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    registration_number: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, unique=True
    )
    owner_name: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    vehicle_class: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    fuel_type: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    maker_model: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    manufacturer: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    registration_date: Mapped[date | None] = mapped_column(sa.Date(), nullable=True)
    insurance_company: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    # Document expiry dates; counted by the overview "expiring this month" figure
    insurance_expiry: Mapped[date | None] = mapped_column(sa.Date(), nullable=True)
    pucc_valid_upto: Mapped[date | None] = mapped_column(sa.Date(), nullable=True)
    fitness_valid_upto: Mapped[date | None] = mapped_column(sa.Date(), nullable=True)
    road_tax_valid_upto: Mapped[date | None] = mapped_column(sa.Date(), nullable=True)
    rc_status: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    is_verified: Mapped[bool] = mapped_column(
        sa.Boolean(), nullable=False, default=False, server_default=sa.false()
    )
    verified_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

class Document(Base):
    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("vehicles.id", ondelete="CASCADE", name="fk_documents_vehicle_id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    # 'insurance', 'rc', 'pucc', 'fitness', 'other'
    document_type: Mapped[str] = mapped_column(sa.String(32), nullable=False)
    document_name: Mapped[str] = mapped_column(sa.Text(), nullable=False)
    file_path: Mapped[str] = mapped_column(sa.Text(), nullable=False)
    file_size: Mapped[int | None] = mapped_column(sa.Integer(), nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now()
    )
