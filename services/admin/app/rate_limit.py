"""
Global slowapi rate limiter.

Imported by admin/router.py for the admin endpoint limit.  Mounted onto
app.state in main.py so slowapi middleware can find it.

Storage: Redis when REDIS_URL is set, otherwise in-memory (local dev, tests).
"""
import os

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.exceptions import RateLimited
from shared.middleware.error_handler import api_error_handler

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return await api_error_handler(request, RateLimited(f"Rate limit exceeded: {exc.detail}"))
