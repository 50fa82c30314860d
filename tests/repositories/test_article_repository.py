# tests/repositories/test_article_repository.py
"""Tests for app/repositories/article.py module."""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ArticleNotFoundError, InvalidArgumentError
from app.repositories import ArticleRepository, CounterName
from tests.conftest import NOW, ArticleFactory


class TestCounterName:
    """Tests for the closed set of counters."""

    def test_columns(self) -> None:
        assert CounterName.VIEWS.column == "view_count"
        assert CounterName.LIKES.column == "like_count"

    def test_unknown_counter_rejected(self) -> None:
        with pytest.raises(ValueError):
            CounterName("shares")


class TestApplyDelta:
    """Tests for ArticleRepository.apply_delta."""

    @pytest.mark.asyncio
    async def test_increment_and_decrement(
        self,
        session: AsyncSession,
        make_article: ArticleFactory,
    ) -> None:
        """Counters move by exactly the delta."""
        article = await make_article(view_count=4, like_count=2)
        repo = ArticleRepository(session)

        await repo.apply_delta(article.id, CounterName.VIEWS, 1)
        await repo.apply_delta(article.id, CounterName.LIKES, -1)
        await session.commit()
        await session.refresh(article)

        assert article.view_count == 5
        assert article.like_count == 1
        assert article.updated_at is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("delta", [0, 2, -2, 10])
    async def test_rejects_other_deltas(
        self,
        session: AsyncSession,
        make_article: ArticleFactory,
        delta: int,
    ) -> None:
        article = await make_article()
        repo = ArticleRepository(session)

        with pytest.raises(InvalidArgumentError):
            await repo.apply_delta(article.id, CounterName.VIEWS, delta)

    @pytest.mark.asyncio
    async def test_missing_article(self, session: AsyncSession) -> None:
        repo = ArticleRepository(session)

        with pytest.raises(ArticleNotFoundError) as exc_info:
            await repo.apply_delta(99999, CounterName.VIEWS, 1)

        assert exc_info.value.status_code == 404


class TestLookups:
    """Tests for article reads."""

    @pytest.mark.asyncio
    async def test_get_or_raise(self, session: AsyncSession, make_article: ArticleFactory) -> None:
        article = await make_article(article_id=42)
        repo = ArticleRepository(session)

        assert (await repo.get_or_raise(42)).id == article.id
        assert await repo.get_by_id(43) is None
        with pytest.raises(ArticleNotFoundError):
            await repo.get_or_raise(43)

    @pytest.mark.asyncio
    async def test_lock_for_engagement_missing(self, session: AsyncSession) -> None:
        with pytest.raises(ArticleNotFoundError):
            await ArticleRepository(session).lock_for_engagement(99999)

    @pytest.mark.asyncio
    async def test_create_seeds_zeroed_counters(self, session: AsyncSession) -> None:
        repo = ArticleRepository(session)

        article = await repo.create(title="Hello", slug="hello", status="published")

        assert article.id is not None
        assert (article.view_count, article.like_count) == (0, 0)


class TestAggregateReads:
    """Tests for totals and rankings."""

    @pytest.mark.asyncio
    async def test_totals_cover_all_statuses(
        self,
        session: AsyncSession,
        make_article: ArticleFactory,
    ) -> None:
        await make_article(view_count=3, like_count=1)
        await make_article(status="draft", published_at=None, view_count=2, like_count=2)

        assert await ArticleRepository(session).totals() == (2, 5, 3)

    @pytest.mark.asyncio
    async def test_totals_empty(self, session: AsyncSession) -> None:
        assert await ArticleRepository(session).totals() == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_ranking_order(self, session: AsyncSession, make_article: ArticleFactory) -> None:
        """Views desc, then likes desc, then id asc."""
        first = await make_article(view_count=10, like_count=3)
        second = await make_article(view_count=10, like_count=7)
        third = await make_article(view_count=5, like_count=1)
        fourth = await make_article(view_count=5, like_count=1)

        ranked = await ArticleRepository(session).get_top_ranked(4)

        assert [a.id for a in ranked] == [second.id, first.id, third.id, fourth.id]

    @pytest.mark.asyncio
    async def test_ranking_skips_unpublished_and_filters_window(
        self,
        session: AsyncSession,
        make_article: ArticleFactory,
    ) -> None:
        recent = await make_article(view_count=1)
        await make_article(published_at=NOW - timedelta(days=40), view_count=50)
        await make_article(status="draft", published_at=None, view_count=99)

        ranked = await ArticleRepository(session).get_top_ranked(
            10,
            published_since=NOW - timedelta(days=7),
        )

        assert [a.id for a in ranked] == [recent.id]

    @pytest.mark.asyncio
    async def test_recent_published(self, session: AsyncSession, make_article: ArticleFactory) -> None:
        older = await make_article(published_at=NOW - timedelta(days=2))
        newer = await make_article(published_at=NOW - timedelta(hours=1))
        await make_article(status="draft", published_at=None)

        recent = await ArticleRepository(session).get_recent_published(5)

        assert [a.id for a in recent] == [newer.id, older.id]
