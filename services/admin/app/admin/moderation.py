"""
Admin domain — moderation actions (zero FastAPI imports).

Every action follows the same order: load and check the target (NOT_FOUND /
state guards), apply one mutation, append exactly one audit row.  Nothing is
appended when nothing changed.

Transaction contract: these functions only flush() — they do NOT commit().
The request-scoped get_db dependency commits at the end, so the mutation and
its audit row land together or not at all.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.user import CurrentUser

from app.constants import LISTING_REVIEWABLE, ClaimStatus, HistoryEventType, ModerationAction
from app.exceptions import (
    AlreadySuspended,
    ClaimNotFound,
    InvalidTransition,
    ListingNotFound,
    SelfSuspension,
    SuspendFailed,
    UnsuspendFailed,
    UpdateFailed,
    VehicleNotFound,
)
from app.models.audit import ModerationAuditEntry
from app.models.history import VehicleHistoryEvent
from app.models.marketplace import OwnershipClaim, VehicleListing
from app.models.suspension import UserSuspension
from app.models.vehicle import Vehicle


def _admin_metadata(admin: CurrentUser, **extra: Any) -> dict[str, Any]:
    return {"admin_email": admin.email, "admin_id": str(admin.id), **extra}


# ── Suspensions ───────────────────────────────────────────────────────────────

async def suspend_user(
    session: AsyncSession,
    admin: CurrentUser,
    user_id: uuid.UUID,
    reason: str | None,
) -> UserSuspension:
    """Insert the suspension; the unique constraint on user_id decides "already suspended"."""
    if user_id == admin.id:
        raise SelfSuspension()

    suspension = UserSuspension(user_id=user_id, suspended_by=admin.id, reason=reason)
    session.add(suspension)
    try:
        await session.flush()
    except IntegrityError as exc:
        raise AlreadySuspended() from exc
    except SQLAlchemyError as exc:
        raise SuspendFailed() from exc

    session.add(
        ModerationAuditEntry(
            actor_id=admin.id,
            actor_email=admin.email,
            action=ModerationAction.USER_SUSPENDED.value,
            target_user_id=user_id,
            reason=reason,
            event_metadata={"suspension_id": str(suspension.id)},
        )
    )
    await session.flush()
    return suspension


async def unsuspend_user(
    session: AsyncSession,
    admin: CurrentUser,
    user_id: uuid.UUID,
) -> bool:
    """Delete the suspension. Returns False (a harmless no-op) if there was none."""
    try:
        result = await session.execute(
            sa.delete(UserSuspension).where(UserSuspension.user_id == user_id)
        )
    except SQLAlchemyError as exc:
        raise UnsuspendFailed() from exc
    if result.rowcount == 0:
        return False

    session.add(
        ModerationAuditEntry(
            actor_id=admin.id,
            actor_email=admin.email,
            action=ModerationAction.USER_UNSUSPENDED.value,
            target_user_id=user_id,
        )
    )
    await session.flush()
    return True


# ── Vehicle verification ──────────────────────────────────────────────────────

async def set_vehicle_verification(
    session: AsyncSession,
    admin: CurrentUser,
    vehicle_id: uuid.UUID,
    is_verified: bool,
) -> bool:
    """Set or clear the verified flag. Returns False when it already had that value."""
    vehicle = await session.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise VehicleNotFound()
    if bool(vehicle.is_verified) == is_verified:
        return False

    vehicle.is_verified = is_verified
    vehicle.verified_at = datetime.now(timezone.utc) if is_verified else None
    label = "verified" if is_verified else "unverified"
    session.add(
        VehicleHistoryEvent(
            vehicle_id=vehicle.id,
            user_id=vehicle.user_id,
            event_type=(
                HistoryEventType.ADMIN_VERIFIED if is_verified else HistoryEventType.ADMIN_UNVERIFIED
            ).value,
            event_description=f"Vehicle {label} by admin",
            event_metadata=_admin_metadata(admin),
        )
    )
    try:
        await session.flush()
    except SQLAlchemyError as exc:
        raise UpdateFailed("Failed to update verification status") from exc
    return True


# ── Ownership claims ──────────────────────────────────────────────────────────

async def update_claim_status(
    session: AsyncSession,
    admin: CurrentUser,
    claim_id: uuid.UUID,
    status: str,
) -> OwnershipClaim:
    """pending → resolved | rejected | expired. Terminal states cannot change again."""
    claim = await session.get(OwnershipClaim, claim_id)
    if claim is None:
        raise ClaimNotFound()
    if claim.status != ClaimStatus.PENDING.value:
        raise InvalidTransition(f"Claim is already {claim.status}")

    claim.status = status
    session.add(
        VehicleHistoryEvent(
            vehicle_id=claim.vehicle_id,
            user_id=claim.current_owner_id,
            event_type=HistoryEventType(f"claim_{status}").value,
            event_description=f"Ownership claim {status} by admin",
            event_metadata=_admin_metadata(
                admin,
                claim_id=str(claim.id),
                claimant_id=str(claim.claimant_id),
            ),
        )
    )
    try:
        await session.flush()
    except SQLAlchemyError as exc:
        raise UpdateFailed("Failed to update claim status") from exc
    return claim


# ── Marketplace listings ──────────────────────────────────────────────────────

async def update_listing_status(
    session: AsyncSession,
    admin: CurrentUser,
    listing_id: uuid.UUID,
    status: str,
    admin_notes: str | None,
) -> VehicleListing:
    """Review a listing that is pending or on hold; records reviewer and time."""
    listing = await session.get(VehicleListing, listing_id)
    if listing is None:
        raise ListingNotFound()
    if listing.status not in LISTING_REVIEWABLE:
        raise InvalidTransition(f"Listing is already {listing.status}")

    listing.status = status
    listing.admin_notes = admin_notes
    listing.reviewed_by = admin.id
    listing.reviewed_at = datetime.now(timezone.utc)
    session.add(
        VehicleHistoryEvent(
            vehicle_id=listing.vehicle_id,
            user_id=listing.user_id,
            event_type=HistoryEventType(f"listing_{status}").value,
            event_description=f"Listing {status} by admin",
            event_metadata=_admin_metadata(
                admin,
                admin_notes=admin_notes,
                expected_price=float(listing.expected_price),
            ),
        )
    )
    try:
        await session.flush()
    except SQLAlchemyError as exc:
        raise UpdateFailed("Failed to update listing status") from exc
    return listing
