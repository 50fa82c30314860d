"""Core application modules."""

from app.db.database import (
    async_session_maker,
    close_db,
    create_engine,
    create_session_maker,
    engine,
    get_session,
    init_db,
    transaction,
)

__all__ = [
    "engine",
    "async_session_maker",
    "create_engine",
    "create_session_maker",
    "get_session",
    "init_db",
    "close_db",
    "transaction",
]
