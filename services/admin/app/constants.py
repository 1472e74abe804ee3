from enum import Enum


class ClaimStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ListingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


class TransferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


# Admin may act on a listing only while it is still under review.
LISTING_REVIEWABLE = frozenset({ListingStatus.PENDING.value, ListingStatus.ON_HOLD.value})


class HistoryEventType(str, Enum):
    """``vehicle_history.event_type`` values written by admin actions."""

    ADMIN_VERIFIED = "ADMIN_VERIFIED"
    ADMIN_UNVERIFIED = "ADMIN_UNVERIFIED"
    CLAIM_RESOLVED = "claim_resolved"
    CLAIM_REJECTED = "claim_rejected"
    CLAIM_EXPIRED = "claim_expired"
    LISTING_APPROVED = "listing_approved"
    LISTING_REJECTED = "listing_rejected"
    LISTING_ON_HOLD = "listing_on_hold"


class ModerationAction(str, Enum):
    """``moderation_audit_log.action`` values for principal-targeted actions."""

    USER_SUSPENDED = "user_suspended"
    USER_UNSUSPENDED = "user_unsuspended"
