import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.admin.router import router as admin_router
from app.config import get_settings
from app.database import close_db, init_db
from app.rate_limit import limiter, rate_limit_exceeded_handler
from shared.middleware.error_handler import api_error_handler, error_envelope_middleware
from shared.middleware.request_id import request_id_middleware

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## VinDoc Admin Service

Backend for the VinDoc admin console.  One endpoint, `POST /api/v1/admin-data`,
dispatches on the `type` field of the JSON body:

* **Aggregates** — `overview`: platform-wide counts (users, vehicles, verified
  vehicles, documents, suspended users, expiries this month).
* **Collections** — `users`, `vehicles`, `activity`, `transfers`, `claims`,
  `listings`: newest first, paginated with `page` / `pageSize` (max 100),
  enriched with owner emails and registration numbers.
* **Moderation** — suspend / unsuspend users, verify vehicles, resolve
  ownership claims, review marketplace listings.  Every change is audited.

### Authentication
```
Authorization: Bearer <access_token>
```
The caller must hold the `super_admin` role in `user_roles`.

### Error shape
```json
{ "success": false, "error": "Human-readable message", "errorCode": "MACHINE_CODE" }
```
"""


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.admin_database_url)
    app.state.http_client = httpx.AsyncClient(timeout=settings.identity_timeout_seconds)
    yield
    await app.state.http_client.aclose()
    await close_db()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="VinDoc Admin Service",
        version="1.0.0",
        description=_DESCRIPTION,
        docs_url="/docs" if settings.env_name != "production" else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, api_error_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including 429s) carry CORS headers.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type", "x-request-id"],
        max_age=600,
    )

    app.include_router(admin_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="admin")

    return app


app = create_app()
