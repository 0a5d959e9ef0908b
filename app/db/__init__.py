"""Core application modules."""

from app.db.database import (
    async_session_maker,
    build_engine,
    build_session_maker,
    close_db,
    engine,
    get_session,
    init_db,
    ping_db,
    transaction,
)

__all__ = [
    "engine",
    "async_session_maker",
    "build_engine",
    "build_session_maker",
    "get_session",
    "init_db",
    "ping_db",
    "close_db",
    "transaction",
]
