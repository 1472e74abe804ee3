"""
Base error type shared by all services.

Every error a client can see carries a stable, machine-readable ``error_code``
next to the human-readable ``detail``.  ``api_error_handler`` renders them
into the standard envelope:

    {"success": false, "error": "<detail>", "errorCode": "<CODE>", "details": {...}}
"""
from typing import Any

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(
        self,
        detail: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.message,
            headers=headers,
        )
        self.details = details


# ── Authentication ────────────────────────────────────────────────────────────

class AuthMissing(ApiError):
    """No ``Authorization: Bearer`` header (or another scheme was used)."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_MISSING"
    message = "Unauthorized"


class AuthInvalid(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_INVALID"
    message = "Invalid token"


class ConfigError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "CONFIG_ERROR"
    message = "Server configuration error"
