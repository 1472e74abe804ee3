"""
Admin service — ownership claims, marketplace listings and transfers.

Tables owned by this module:
  - ownership_claims    A user claiming a vehicle registered to someone else
  - vehicle_listings    Sell requests awaiting / after admin review
  - vehicle_transfers   Owner-initiated transfers (read-only for admins)

Claim state machine (admin-driven, terminal once left):
  pending → resolved | rejected | expired

Listing state machine (admin part):
  pending | on_hold → approved | rejected | on_hold
"""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from shared.database.postgres import Base

from app.constants import ClaimStatus, ListingStatus, TransferStatus


def _status_check(column: str, values: type, name: str) -> sa.CheckConstraint:
    allowed = ", ".join(f"'{v.value}'" for v in values)
    return sa.CheckConstraint(f"{column} IN ({allowed})", name=name)


class OwnershipClaim(Base):
    __tablename__ = "ownership_claims"
    __table_args__ = (_status_check("status", ClaimStatus, "ck_ownership_claims_status"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("vehicles.id", ondelete="CASCADE", name="fk_ownership_claims_vehicle_id"),
        nullable=False,
        index=True,
    )
    claimant_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    # Captured at claim time; used when the identity provider no longer knows the claimant
    claimant_email: Mapped[str] = mapped_column(sa.Text(), nullable=False)
    claimant_phone: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    current_owner_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    registration_number: Mapped[str] = mapped_column(sa.String(20), nullable=False)
    message: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    status: Mapped[str] = mapped_column(
        sa.String(16),
        nullable=False,
        default=ClaimStatus.PENDING.value,
        server_default=sa.text("'pending'"),
    )
    expires_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )


class VehicleListing(Base):
    __tablename__ = "vehicle_listings"
    __table_args__ = (
        _status_check("status", ListingStatus, "ck_vehicle_listings_status"),
        # Only one live listing per vehicle
        sa.Index(
            "uq_vehicle_listings_active_vehicle",
            "vehicle_id",
            unique=True,
            postgresql_where=sa.text("status IN ('pending', 'approved', 'on_hold')"),
            sqlite_where=sa.text("status IN ('pending', 'approved', 'on_hold')"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("vehicles.id", ondelete="CASCADE", name="fk_vehicle_listings_vehicle_id"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    ai_estimated_price: Mapped[Decimal | None] = mapped_column(sa.Numeric(), nullable=True)
    expected_price: Mapped[Decimal] = mapped_column(sa.Numeric(), nullable=False)
    additional_notes: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    status: Mapped[str] = mapped_column(
        sa.String(16),
        nullable=False,
        default=ListingStatus.PENDING.value,
        server_default=sa.text("'pending'"),
    )
    admin_notes: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(
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


class VehicleTransfer(Base):
    __tablename__ = "vehicle_transfers"
    __table_args__ = (_status_check("status", TransferStatus, "ck_vehicle_transfers_status"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("vehicles.id", ondelete="CASCADE", name="fk_vehicle_transfers_vehicle_id"),
        nullable=False,
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    recipient_email: Mapped[str] = mapped_column(sa.Text(), nullable=False)
    recipient_phone: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    recipient_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    status: Mapped[str] = mapped_column(
        sa.String(16),
        nullable=False,
        default=TransferStatus.PENDING.value,
        server_default=sa.text("'pending'"),
    )
    expires_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
