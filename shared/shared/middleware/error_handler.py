import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": message, "errorCode": error_code}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def api_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render ApiError (and plain HTTPException, e.g. 404/405 routing) as the envelope."""
    error_code = getattr(exc, "error_code", None) or "HTTP_ERROR"
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "[%s] %s %s failed: %s (%s)",
            getattr(request.state, "request_id", None),
            request.method,
            request.url.path,
            message,
            error_code,
        )
    return error_response(
        exc.status_code,
        message,
        error_code,
        details=getattr(exc, "details", None),
        headers=getattr(exc, "headers", None),
    )


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except Exception:
        request_id = getattr(request.state, "request_id", None)
        logger.exception("[%s] Unhandled exception", request_id)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            "INTERNAL_ERROR",
            headers={"X-Request-ID": request_id} if request_id else None,
        )
