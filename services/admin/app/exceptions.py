"""
Admin service — domain-specific API errors.

All errors use preset status codes, messages and error codes so that callers
never need to specify these at the call site.  The shared api_error_handler
renders them into the standard failure envelope.
"""
from fastapi import status

from shared.exceptions import ApiError


# ── Authorization ─────────────────────────────────────────────────────────────

class RoleCheckFailed(ApiError):
    """The role lookup itself failed; never read as either "admin" or "not admin"."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "ROLE_CHECK_FAILED"
    message = "Authorization check failed"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    message = "Forbidden - Admin access required"


# ── Request shape ─────────────────────────────────────────────────────────────

class InvalidJSON(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_JSON"
    message = "Invalid JSON body"


class InvalidAction(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_ACTION"
    message = "Invalid action type"


class UnknownAction(ApiError):
    """Whitelisted type with no registered handler."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "UNKNOWN_ACTION"
    message = "Unknown action type"


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    message = "Invalid input"


# ── Moderation ────────────────────────────────────────────────────────────────

class SelfSuspension(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "SELF_SUSPENSION"
    message = "Cannot suspend yourself"


class AlreadySuspended(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "ALREADY_SUSPENDED"
    message = "User is already suspended"


class SuspendFailed(ApiError):
    error_code = "SUSPEND_FAILED"
    message = "Failed to suspend user"


class UnsuspendFailed(ApiError):
    error_code = "UNSUSPEND_FAILED"
    message = "Failed to unsuspend user"


class UpdateFailed(ApiError):
    error_code = "UPDATE_FAILED"
    message = "Failed to update record"


class InvalidTransition(ApiError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "INVALID_TRANSITION"
    message = "Status transition not allowed"


class _NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class VehicleNotFound(_NotFound):
    message = "Vehicle not found"


class ClaimNotFound(_NotFound):
    message = "Claim not found"


class ListingNotFound(_NotFound):
    message = "Listing not found"


# ── Transport ─────────────────────────────────────────────────────────────────

class RequestTimeout(ApiError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    error_code = "REQUEST_TIMEOUT"
    message = "Request took too long to complete"


class RateLimited(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error_code = "RATE_LIMITED"
    message = "Too many requests. Please slow down."
