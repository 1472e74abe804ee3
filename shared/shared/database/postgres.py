import os
import ssl
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Supabase's pooler caps connections per project; keep each service small
POOL_SIZE = 5
MAX_OVERFLOW = 5
POOL_RECYCLE_SECONDS = 1800


def _ssl_connect_args() -> dict[str, Any]:
    """asyncpg ``connect_args`` from DATABASE_SSL (disable | require | verify-full)."""
    mode = os.environ.get("DATABASE_SSL", "").lower()
    if mode in ("", "disable"):
        return {}
    if mode == "verify-full":
        root_cert = os.environ.get("DATABASE_SSL_ROOT_CERT", "")
        if not root_cert or not Path(root_cert).is_file():
            raise RuntimeError("DATABASE_SSL=verify-full needs DATABASE_SSL_ROOT_CERT pointing at a CA file")
        return {"connect_args": {"ssl": ssl.create_default_context(cafile=root_cert)}}
    # 'require': encrypted, certificate not verified
    return {"connect_args": {"ssl": "require"}}


def get_async_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    if not database_url.startswith("postgresql"):
        # sqlite (tests, local tooling) picks its own pool; pool sizing and SSL are asyncpg-only
        return create_async_engine(database_url, **kwargs)
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": POOL_SIZE,
        "max_overflow": MAX_OVERFLOW,
        "pool_recycle": POOL_RECYCLE_SECONDS,
        **_ssl_connect_args(),
        **kwargs,
    }
    return create_async_engine(database_url, **options)


def get_async_session_factory(
    database_url: str,
    *,
    expire_on_commit: bool = False,
    **engine_kwargs: Any,
) -> async_sessionmaker[AsyncSession]:
    engine = get_async_engine(database_url, **engine_kwargs)
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=expire_on_commit,
        autoflush=False,
    )


async def dispose_session_factory(factory: async_sessionmaker[AsyncSession]) -> None:
    """Close every pooled connection behind ``factory``."""
    await factory.kw["bind"].dispose()


AsyncSessionFactory = async_sessionmaker[AsyncSession]
