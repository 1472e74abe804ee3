import asyncio
import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import close_db, get_session_factory, init_db
from app.identity.client import get_identity_provider
from app.main import app
from app.models import UserRole, Vehicle
from app.rate_limit import limiter
from shared.auth.config import AuthSettings
from shared.auth.dependencies import get_auth_settings
from shared.constants import Role
from shared.database.postgres import Base

TEST_SECRET = "test-jwt-secret-with-enough-length"
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-00000000a001")
ADMIN_EMAIL = "admin@vindoc.test"
ENDPOINT = "/api/v1/admin-data"


def make_token(
    user_id: uuid.UUID = ADMIN_ID,
    email: str = ADMIN_EMAIL,
    *,
    secret: str = TEST_SECRET,
    audience: str = "authenticated",
    expires_in: timedelta = timedelta(minutes=5),
) -> str:
    payload = {
        "sub": str(user_id),
        "email": email,
        "aud": audience,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id: uuid.UUID = ADMIN_ID, email: str = ADMIN_EMAIL) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, email)}"}


def ts(minutes: int) -> datetime:
    """Deterministic created_at values: larger ``minutes`` = newer row."""
    return datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes)


class FakeIdentity:
    """In-memory identity provider that records lookups and peak concurrency."""

    def __init__(self, emails: dict[uuid.UUID, str] | None = None, delay: float = 0.0) -> None:
        self.emails = dict(emails or {})
        self.delay = delay
        self.calls: list[uuid.UUID] = []
        self.in_flight = 0
        self.peak = 0

    async def get_user_email(self, user_id: uuid.UUID) -> str | None:
        self.calls.append(user_id)
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            # Yield so that lookups in the same batch overlap
            await asyncio.sleep(self.delay)
            return self.emails.get(user_id)
        finally:
            self.in_flight -= 1


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    url = f"sqlite+aiosqlite:///{tmp_path / 'admin.db'}"
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()

    init_db(url)
    yield get_session_factory()
    await close_db()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity({ADMIN_ID: ADMIN_EMAIL})


@pytest_asyncio.fixture
async def client(session_factory, identity) -> AsyncGenerator[AsyncClient, None]:
    limiter.reset()
    app.dependency_overrides[get_auth_settings] = lambda: AuthSettings(secret=TEST_SECRET)
    app.dependency_overrides[get_identity_provider] = lambda: identity
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def super_admin(db) -> uuid.UUID:
    db.add(UserRole(user_id=ADMIN_ID, role=Role.SUPER_ADMIN.value))
    await db.commit()
    return ADMIN_ID


async def add_vehicle(
    session: AsyncSession,
    user_id: uuid.UUID,
    registration_number: str,
    *,
    minutes: int = 0,
    **fields,
) -> Vehicle:
    vehicle = Vehicle(
        user_id=user_id,
        registration_number=registration_number,
        created_at=ts(minutes),
        updated_at=ts(minutes),
        **fields,
    )
    session.add(vehicle)
    await session.commit()
    return vehicle
