"""
Admin domain — Pydantic V2 request/response schemas.

Request models are the per-action input validators.  Field names follow what
the admin console sends (camelCase); extra keys such as ``type`` are ignored.
Response models mirror the table columns (snake_case) plus camelCase
enrichment fields, which is the shape the console renders.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StringConstraints


class _Request(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ── Requests ─────────────────────────────────────────────────────────────────

class SuspendUserRequest(_Request):
    user_id: uuid.UUID = Field(alias="userId")
    reason: str | None = Field(default=None, max_length=500)


class UnsuspendUserRequest(_Request):
    user_id: uuid.UUID = Field(alias="userId")


class SetVehicleVerificationRequest(_Request):
    vehicle_id: uuid.UUID = Field(alias="vehicleId")
    is_verified: StrictBool = Field(alias="isVerified")


RegistrationNumber = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_upper=True, min_length=1, max_length=20),
]


class VehicleForClaimRequest(_Request):
    """Lookup used when an admin files a claim on behalf of a user."""

    registration_number: RegistrationNumber = Field(alias="registrationNumber")


class UpdateClaimStatusRequest(_Request):
    claim_id: uuid.UUID = Field(alias="claimId")
    status: Literal["resolved", "rejected", "expired"]


class UpdateListingStatusRequest(_Request):
    listing_id: uuid.UUID = Field(alias="listingId")
    status: Literal["approved", "rejected", "on_hold"]
    admin_notes: str | None = Field(default=None, alias="adminNotes", max_length=1000)


class EmptyRequest(_Request):
    """Actions without parameters."""


# ── Responses ────────────────────────────────────────────────────────────────

class _Row(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class OverviewResponse(_Row):
    total_users: int = Field(alias="totalUsers")
    total_vehicles: int = Field(alias="totalVehicles")
    verified_vehicles: int = Field(alias="verifiedVehicles")
    total_documents: int = Field(alias="totalDocuments")
    expiring_this_month: int = Field(alias="expiringThisMonth")
    suspended_users: int = Field(alias="suspendedUsers")


class UserItem(_Row):
    """A vehicle owner, derived by grouping vehicles by user_id."""

    user_id: uuid.UUID = Field(alias="userId")
    email: str
    vehicle_count: int = Field(alias="vehicleCount")
    document_count: int = Field(alias="documentCount")
    join_date: datetime | None = Field(alias="joinDate")
    is_suspended: bool = Field(alias="isSuspended")
    suspended_at: datetime | None = Field(alias="suspendedAt")
    suspension_reason: str | None = Field(alias="suspensionReason")


class VehicleItem(_Row):
    id: uuid.UUID
    user_id: uuid.UUID
    registration_number: str
    owner_name: str | None
    vehicle_class: str | None
    fuel_type: str | None
    maker_model: str | None
    manufacturer: str | None
    registration_date: date | None
    insurance_company: str | None
    insurance_expiry: date | None
    pucc_valid_upto: date | None
    fitness_valid_upto: date | None
    road_tax_valid_upto: date | None
    rc_status: str | None
    is_verified: bool
    verified_at: datetime | None
    created_at: datetime
    updated_at: datetime
    user_email: str = Field(alias="userEmail")


class ActivityItem(_Row):
    id: uuid.UUID
    event_type: str
    event_description: str
    created_at: datetime
    user_id: uuid.UUID
    vehicle_id: uuid.UUID
    event_metadata: dict[str, Any] = Field(alias="metadata")
    user_email: str = Field(alias="userEmail")
    registration_number: str = Field(alias="registrationNumber")


class TransferItem(_Row):
    id: uuid.UUID
    vehicle_id: uuid.UUID
    sender_id: uuid.UUID
    recipient_email: str
    recipient_phone: str | None
    recipient_id: uuid.UUID | None
    status: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    sender_email: str = Field(alias="senderEmail")
    registration_number: str = Field(alias="registrationNumber")
    maker_model: str | None = Field(alias="makerModel")


class ClaimItem(_Row):
    id: uuid.UUID
    vehicle_id: uuid.UUID
    claimant_id: uuid.UUID
    claimant_email: str
    claimant_phone: str | None
    current_owner_id: uuid.UUID
    registration_number: str
    message: str | None
    status: str
    expires_at: datetime
    created_at: datetime
    claimant_email_display: str = Field(alias="claimantEmail")
    owner_email: str = Field(alias="ownerEmail")
    maker_model: str | None = Field(alias="makerModel")


class ListingItem(_Row):
    id: uuid.UUID
    vehicle_id: uuid.UUID
    user_id: uuid.UUID
    ai_estimated_price: float | None
    expected_price: float
    additional_notes: str | None
    status: str
    admin_notes: str | None
    reviewed_by: uuid.UUID | None
    reviewed_at: datetime | None
    created_at: datetime
    updated_at: datetime
    user_email: str = Field(alias="userEmail")
    registration_number: str = Field(alias="registrationNumber")
    maker_model: str | None = Field(alias="makerModel")
    manufacturer: str | None


class VehicleForClaimResponse(_Row):
    found: bool
    vehicle_id: uuid.UUID | None = Field(default=None, alias="vehicleId")
    owner_id: uuid.UUID | None = Field(default=None, alias="ownerId")
    maker_model: str | None = Field(default=None, alias="makerModel")
