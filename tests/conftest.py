# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Point the application at an in-memory SQLite database and keep logs on the
# console. This must happen before app is imported anywhere.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_TO_FILE"] = "false"
os.environ["ANALYTICS_TIMEZONE"] = "UTC"
os.environ["ENVIRONMENT"] = "testing"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from typing import TypeAlias  # noqa: E402
from datetime import UTC, datetime  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from app.db import create_session_maker  # noqa: E402
from app.models import ArticleDB, ArticleLikeDB, ArticleViewDB  # noqa: E402, F401

ArticleFactory: TypeAlias = Callable[..., Awaitable[ArticleDB]]

# Reference instant used across tests: Friday 2026-02-13 15:00 UTC
NOW = datetime(2026, 2, 13, 15, 0, tzinfo=UTC)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create a fresh in-memory database with the analytics schema."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide a session bound to the test database."""
    async with create_session_maker(engine)() as db_session:
        yield db_session


@pytest.fixture
def make_article(session: AsyncSession) -> ArticleFactory:
    """Factory inserting committed articles with preset counters."""
    sequence = count(1)

    async def _make(
        *,
        article_id: int | None = None,
        status: str = "published",
        published_at: datetime | None = NOW,
        view_count: int = 0,
        like_count: int = 0,
        title: str | None = None,
    ) -> ArticleDB:
        number = next(sequence)
        article = ArticleDB(
            id=article_id,
            title=title or f"Article {number}",
            slug=f"article-{number}",
            status=status,
            published_at=published_at,
            view_count=view_count,
            like_count=like_count,
            created_at=NOW,
        )
        session.add(article)
        await session.commit()
        await session.refresh(article)
        return article

    return _make
