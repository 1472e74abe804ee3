from shared.database.postgres import (
    AsyncSessionFactory,
    Base,
    dispose_session_factory,
    get_async_session_factory,
)

__all__ = [
    "AsyncSessionFactory",
    "Base",
    "dispose_session_factory",
    "get_async_session_factory",
]
