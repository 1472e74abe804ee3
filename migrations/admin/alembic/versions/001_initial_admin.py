"""Admin schema: vehicles, documents, history, roles, suspensions, marketplace, audit

Revision ID: 001
Revises:
Create Date: 2026-10-16

Tables created:
  - vehicles               Registered vehicles (owner app writes, admin verifies)
  - documents              Uploaded files per vehicle
  - vehicle_history        Append-only per-vehicle event log
  - user_roles             (user_id, role) pairs; sole source of admin authorization
  - user_suspensions       At most one row per user
  - ownership_claims       Claims on vehicles registered to another user
  - vehicle_listings       Marketplace sell requests under admin review
  - vehicle_transfers      Owner-initiated transfers
  - moderation_audit_log   Suspend / unsuspend audit trail

Status columns are VARCHAR + CHECK rather than native ENUM types so new
states only need a constraint swap.

Downgrade: drops all tables in reverse dependency order.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        nullable=False,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


# ─────────────────────────────────────────────────────────────────────────────
#  UPGRADE
# ─────────────────────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── 1. vehicles ───────────────────────────────────────────────────────────
    op.create_table(
        "vehicles",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("registration_number", sa.String(20), nullable=False),
        sa.Column("owner_name", sa.Text(), nullable=True),
        sa.Column("vehicle_class", sa.Text(), nullable=True),
        sa.Column("fuel_type", sa.Text(), nullable=True),
        sa.Column("maker_model", sa.Text(), nullable=True),
        sa.Column("manufacturer", sa.Text(), nullable=True),
        sa.Column("registration_date", sa.Date(), nullable=True),
        sa.Column("insurance_company", sa.Text(), nullable=True),
        # Expiry dates counted by the overview
        sa.Column("insurance_expiry", sa.Date(), nullable=True),
        sa.Column("pucc_valid_upto", sa.Date(), nullable=True),
        sa.Column("fitness_valid_upto", sa.Date(), nullable=True),
        sa.Column("road_tax_valid_upto", sa.Date(), nullable=True),
        sa.Column("rc_status", sa.Text(), nullable=True),
        sa.Column(
            "is_verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_vehicles"),
        sa.UniqueConstraint("registration_number", name="uq_vehicles_registration_number"),
    )
    op.create_index("ix_vehicles_user_id", "vehicles", ["user_id"])
    op.create_index("ix_vehicles_created_at", "vehicles", ["created_at"])

    # ── 2. documents ──────────────────────────────────────────────────────────
    op.create_table(
        "documents",
        _id(),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("document_type", sa.String(32), nullable=False),
        sa.Column("document_name", sa.Text(), nullable=False),
        sa.Column("file_path", sa.Text(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=True),
        _timestamp("uploaded_at"),
        sa.PrimaryKeyConstraint("id", name="pk_documents"),
        sa.ForeignKeyConstraint(
            ["vehicle_id"], ["vehicles.id"], name="fk_documents_vehicle_id", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_documents_vehicle_id", "documents", ["vehicle_id"])
    op.create_index("ix_documents_user_id", "documents", ["user_id"])

    # ── 3. vehicle_history ────────────────────────────────────────────────────
    op.create_table(
        "vehicle_history",
        _id(),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("event_type", sa.String(64), nullable=False),
        sa.Column("event_description", sa.Text(), nullable=False),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_vehicle_history"),
        sa.ForeignKeyConstraint(
            ["vehicle_id"], ["vehicles.id"], name="fk_vehicle_history_vehicle_id", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_vehicle_history_vehicle_id", "vehicle_history", ["vehicle_id"])
    op.create_index("ix_vehicle_history_created_at", "vehicle_history", ["created_at"])

    # ── 4. user_roles ─────────────────────────────────────────────────────────
    op.create_table(
        "user_roles",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_user_roles"),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_id_role"),
        sa.CheckConstraint("role IN ('user', 'super_admin')", name="ck_user_roles_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])

    # ── 5. user_suspensions ───────────────────────────────────────────────────
    op.create_table(
        "user_suspensions",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("suspended_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        _timestamp("suspended_at"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_user_suspensions"),
        sa.UniqueConstraint("user_id", name="uq_user_suspensions_user_id"),
    )

    # ── 6. ownership_claims ───────────────────────────────────────────────────
    op.create_table(
        "ownership_claims",
        _id(),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("claimant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("claimant_email", sa.Text(), nullable=False),
        sa.Column("claimant_phone", sa.Text(), nullable=True),
        sa.Column("current_owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("registration_number", sa.String(20), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_ownership_claims"),
        sa.ForeignKeyConstraint(
            ["vehicle_id"], ["vehicles.id"], name="fk_ownership_claims_vehicle_id", ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'resolved', 'rejected', 'expired')",
            name="ck_ownership_claims_status",
        ),
    )
    op.create_index("ix_ownership_claims_vehicle_id", "ownership_claims", ["vehicle_id"])
    op.create_index("ix_ownership_claims_created_at", "ownership_claims", ["created_at"])

    # ── 7. vehicle_listings ───────────────────────────────────────────────────
    op.create_table(
        "vehicle_listings",
        _id(),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("ai_estimated_price", sa.Numeric(), nullable=True),
        sa.Column("expected_price", sa.Numeric(), nullable=False),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_vehicle_listings"),
        sa.ForeignKeyConstraint(
            ["vehicle_id"], ["vehicles.id"], name="fk_vehicle_listings_vehicle_id", ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'on_hold', 'cancelled')",
            name="ck_vehicle_listings_status",
        ),
    )
    op.create_index("ix_vehicle_listings_created_at", "vehicle_listings", ["created_at"])
    # One live listing per vehicle
    op.create_index(
        "uq_vehicle_listings_active_vehicle",
        "vehicle_listings",
        ["vehicle_id"],
        unique=True,
        postgresql_where=sa.text("status IN ('pending', 'approved', 'on_hold')"),
    )

    # ── 8. vehicle_transfers ──────────────────────────────────────────────────
    op.create_table(
        "vehicle_transfers",
        _id(),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sender_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("recipient_email", sa.Text(), nullable=False),
        sa.Column("recipient_phone", sa.Text(), nullable=True),
        sa.Column("recipient_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_vehicle_transfers"),
        sa.ForeignKeyConstraint(
            ["vehicle_id"], ["vehicles.id"], name="fk_vehicle_transfers_vehicle_id", ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected', 'expired', 'cancelled')",
            name="ck_vehicle_transfers_status",
        ),
    )
    op.create_index("ix_vehicle_transfers_created_at", "vehicle_transfers", ["created_at"])

    # ── 9. moderation_audit_log ───────────────────────────────────────────────
    op.create_table(
        "moderation_audit_log",
        _id(),
        sa.Column("actor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("actor_email", sa.Text(), nullable=False),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("target_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_moderation_audit_log"),
    )
    op.create_index(
        "ix_moderation_audit_log_target_user_id", "moderation_audit_log", ["target_user_id"]
    )


# ─────────────────────────────────────────────────────────────────────────────
#  DOWNGRADE
# ─────────────────────────────────────────────────────────────────────────────

def downgrade() -> None:
    op.drop_table("moderation_audit_log")
    op.drop_table("vehicle_transfers")
    op.drop_index("uq_vehicle_listings_active_vehicle", table_name="vehicle_listings")
    op.drop_table("vehicle_listings")
    op.drop_table("ownership_claims")
    op.drop_table("user_suspensions")
    op.drop_table("user_roles")
    op.drop_table("vehicle_history")
    op.drop_table("documents")
    op.drop_table("vehicles")
