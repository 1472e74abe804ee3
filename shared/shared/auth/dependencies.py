import logging
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from shared.auth.config import AuthSettings
from shared.exceptions import AuthInvalid, AuthMissing, ConfigError
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)

# auto_error=False: a missing header or a non-Bearer scheme yields None so we
# can answer with our own AUTH_MISSING envelope instead of FastAPI's 403.
http_bearer = HTTPBearer(auto_error=False)


def get_auth_settings() -> AuthSettings:
    return AuthSettings()


def _decode_token(token: str, settings: AuthSettings) -> dict:
    return jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        audience=settings.audience,
    )


def _payload_to_user(payload: dict) -> CurrentUser:
    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Missing sub in token")
    email = payload.get("email") or ""
    return CurrentUser(id=UUID(user_id), email=email)


async def get_current_user_required(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    settings: AuthSettings = Depends(get_auth_settings),
) -> CurrentUser:
    request_id = getattr(request.state, "request_id", None)
    if not credentials or not credentials.credentials:
        logger.info("[%s] Missing or invalid auth header", request_id)
        raise AuthMissing(headers={"WWW-Authenticate": "Bearer"})
    if not settings.secret:
        logger.error("[%s] JWT_SECRET is not configured", request_id)
        raise ConfigError()
    try:
        payload = _decode_token(credentials.credentials, settings)
        return _payload_to_user(payload)
    except (JWTError, ValueError, KeyError) as exc:
        logger.info("[%s] Invalid token: %s", request_id, exc)
        raise AuthInvalid(headers={"WWW-Authenticate": "Bearer"}) from exc
