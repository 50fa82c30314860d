# tests/services/test_aggregation.py
"""Tests for app/services/aggregation.py module."""

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ArticleNotFoundError, InvalidArgumentError, InvalidRangeError
from app.services import AnalyticsAggregator, EngagementService
from app.services.aggregation import average_views
from tests.conftest import NOW, ArticleFactory

TODAY = date(2026, 2, 13)


@pytest.fixture
def aggregator(session: AsyncSession) -> AnalyticsAggregator:
    return AnalyticsAggregator(session)


@pytest.fixture
def engagement(session: AsyncSession) -> EngagementService:
    return EngagementService(session)


class TestAverageViews:
    """Tests for the per-visitor average."""

    def test_no_visitors(self) -> None:
        assert average_views(0, 0) == 0.0

    def test_rounded_to_two_decimals(self) -> None:
        assert average_views(10, 3) == 3.33
        assert average_views(5, 5) == 1.0


class TestDashboardMetrics:
    """Tests for AnalyticsAggregator.dashboard_metrics."""

    @pytest.mark.asyncio
    async def test_empty_store(self, aggregator: AnalyticsAggregator) -> None:
        metrics = await aggregator.dashboard_metrics("all", now=NOW)

        assert (metrics.total_articles, metrics.total_views, metrics.total_likes) == (0, 0, 0)
        assert metrics.recent_articles == []
        assert metrics.top_articles == []
        assert metrics.views_trend == []
        assert metrics.date_range.range == "all"
        assert metrics.date_range.start is None
        assert metrics.generated_at == NOW

    @pytest.mark.asyncio
    async def test_empty_store_with_window_is_zero_filled(
        self,
        aggregator: AnalyticsAggregator,
    ) -> None:
        metrics = await aggregator.dashboard_metrics("7d", now=NOW)

        assert len(metrics.views_trend) == 7
        assert all(point.views == 0 for point in metrics.views_trend)
        assert metrics.views_trend[0].day == TODAY - timedelta(days=6)
        assert metrics.views_trend[-1].day == TODAY

    @pytest.mark.asyncio
    async def test_totals_lists_and_trend(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
        engagement: EngagementService,
    ) -> None:
        popular = await make_article(published_at=NOW - timedelta(days=1))
        fresh = await make_article(published_at=NOW - timedelta(hours=2))
        await make_article(status="draft", published_at=None)

        await engagement.record_view(popular.id, "a", now=NOW - timedelta(days=2))
        await engagement.record_view(popular.id, "a", now=NOW)
        await engagement.record_view(popular.id, "b", now=NOW)
        await engagement.record_view(fresh.id, "a", now=NOW)
        await engagement.toggle_like(fresh.id, "a", now=NOW)

        metrics = await aggregator.dashboard_metrics("7d", now=NOW)

        assert (metrics.total_articles, metrics.total_views, metrics.total_likes) == (3, 4, 1)
        assert [a.id for a in metrics.recent_articles] == [fresh.id, popular.id]
        assert [a.id for a in metrics.top_articles] == [popular.id, fresh.id]
        trend = {point.day: point.views for point in metrics.views_trend}
        assert len(trend) == 7
        assert trend[TODAY] == 3
        assert trend[TODAY - timedelta(days=1)] == 0
        assert trend[TODAY - timedelta(days=2)] == 1

    @pytest.mark.asyncio
    async def test_top_articles_ignore_range(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
    ) -> None:
        veteran = await make_article(published_at=NOW - timedelta(days=90), view_count=500)
        newcomer = await make_article(published_at=NOW - timedelta(days=1), view_count=1)

        metrics = await aggregator.dashboard_metrics("7d", now=NOW)

        assert [a.id for a in metrics.top_articles] == [veteran.id, newcomer.id]
        assert metrics.date_range.range == "7d"

    @pytest.mark.asyncio
    async def test_all_time_trend_starts_at_first_view(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
        engagement: EngagementService,
    ) -> None:
        article = await make_article(published_at=NOW - timedelta(days=60))
        await engagement.record_view(article.id, "a", now=NOW - timedelta(days=45))

        metrics = await aggregator.dashboard_metrics("all", now=NOW)

        assert len(metrics.views_trend) == 46
        assert metrics.views_trend[0].views == 1
        assert metrics.views_trend[-1].day == TODAY

    @pytest.mark.asyncio
    async def test_invalid_range(self, aggregator: AnalyticsAggregator) -> None:
        with pytest.raises(InvalidRangeError):
            await aggregator.dashboard_metrics("90d", now=NOW)


class TestTopArticles:
    """Tests for AnalyticsAggregator.top_articles."""

    @pytest.mark.asyncio
    async def test_ranking_and_limit(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
    ) -> None:
        a = await make_article(view_count=10, like_count=3)
        b = await make_article(view_count=10, like_count=7)
        c = await make_article(view_count=5, like_count=1)

        top = await aggregator.top_articles(limit=2, now=NOW)

        assert [article.id for article in top.articles] == [b.id, a.id]
        assert top.limit == 2
        assert c.id not in [article.id for article in top.articles]

    @pytest.mark.asyncio
    async def test_window_filters_by_publication(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
    ) -> None:
        await make_article(published_at=NOW - timedelta(days=45), view_count=100)
        recent = await make_article(published_at=NOW - timedelta(days=3), view_count=1)

        top = await aggregator.top_articles(limit=10, range_label="30d", now=NOW)

        assert [article.id for article in top.articles] == [recent.id]
        assert top.date_range.period == "30 days"

    @pytest.mark.asyncio
    async def test_fewer_articles_than_limit(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
    ) -> None:
        await make_article()

        top = await aggregator.top_articles(limit=50, now=NOW)

        assert len(top.articles) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 51, -3, True])
    async def test_limit_out_of_bounds(
        self,
        aggregator: AnalyticsAggregator,
        limit: int,
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await aggregator.top_articles(limit=limit, now=NOW)


class TestArticleAnalytics:
    """Tests for AnalyticsAggregator.article_analytics."""

    @pytest.mark.asyncio
    async def test_trend_is_dense_and_ascending(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
        engagement: EngagementService,
    ) -> None:
        article = await make_article()
        await engagement.record_view(article.id, "a", now=NOW - timedelta(days=3))
        await engagement.record_view(article.id, "a", now=NOW)
        await engagement.record_view(article.id, "b", now=NOW)
        await engagement.toggle_like(article.id, "b", now=NOW)

        result = await aggregator.article_analytics(article.id, days=7, now=NOW)

        assert result.days == 7
        assert len(result.trend) == 7
        assert [point.day for point in result.trend] == [
            TODAY - timedelta(days=offset) for offset in range(6, -1, -1)
        ]
        by_day = {point.day: point for point in result.trend}
        assert (by_day[TODAY].views, by_day[TODAY].likes) == (2, 1)
        assert by_day[TODAY - timedelta(days=3)].views == 1
        assert by_day[TODAY - timedelta(days=1)].views == 0
        assert result.article.view_count == 3
        assert result.article.like_count == 1

    @pytest.mark.asyncio
    async def test_default_days(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
    ) -> None:
        article = await make_article()

        result = await aggregator.article_analytics(article.id, now=NOW)

        assert result.days == 30
        assert len(result.trend) == 30

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, 366, -1])
    async def test_days_out_of_bounds(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
        days: int,
    ) -> None:
        article = await make_article()

        with pytest.raises(InvalidArgumentError):
            await aggregator.article_analytics(article.id, days=days, now=NOW)

    @pytest.mark.asyncio
    async def test_missing_article(self, aggregator: AnalyticsAggregator) -> None:
        with pytest.raises(ArticleNotFoundError):
            await aggregator.article_analytics(99999, now=NOW)


class TestEngagementSummary:
    """Tests for AnalyticsAggregator.engagement_summary."""

    @pytest.mark.asyncio
    async def test_no_visitors(self, aggregator: AnalyticsAggregator) -> None:
        summary = await aggregator.engagement_summary("7d", now=NOW)

        assert summary.period == "7 days"
        assert summary.total_views == 0
        assert summary.unique_visitors == 0
        assert summary.avg_views_per_visitor == 0.0

    @pytest.mark.asyncio
    async def test_counts_inside_window(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
        engagement: EngagementService,
    ) -> None:
        first = await make_article()
        second = await make_article()
        await engagement.record_view(first.id, "a", now=NOW - timedelta(hours=1))
        await engagement.record_view(first.id, "a", now=NOW - timedelta(days=1))
        await engagement.record_view(first.id, "b", now=NOW - timedelta(hours=1))
        await engagement.record_view(second.id, "a", now=NOW - timedelta(hours=1))
        await engagement.record_view(second.id, "c", now=NOW - timedelta(days=20))
        await engagement.toggle_like(first.id, "a", now=NOW - timedelta(hours=1))

        summary = await aggregator.engagement_summary("7d", now=NOW)

        assert summary.articles_viewed == 2
        assert summary.total_views == 4
        assert summary.unique_visitors == 2
        assert summary.total_likes == 1
        assert summary.avg_views_per_visitor == 2.0

        monthly = await aggregator.engagement_summary("30d", now=NOW)
        assert monthly.period == "30 days"
        assert monthly.total_views == 5
        assert monthly.unique_visitors == 3
        assert monthly.avg_views_per_visitor == 1.67

    @pytest.mark.asyncio
    async def test_offset_timestamps_bucket_by_instant(
        self,
        make_article: ArticleFactory,
        aggregator: AnalyticsAggregator,
        engagement: EngagementService,
    ) -> None:
        article = await make_article()
        jakarta = timezone(timedelta(hours=7))
        # 2026-02-06 23:30 UTC, just before the 7d window opens
        before_window = datetime(2026, 2, 7, 6, 30, tzinfo=jakarta)
        # 2026-02-13 14:30 UTC, just before NOW
        inside_window = datetime(2026, 2, 13, 21, 30, tzinfo=jakarta)

        await engagement.record_view(article.id, "early", now=before_window)
        await engagement.toggle_like(article.id, "early", now=before_window)
        await engagement.record_view(article.id, "late", now=inside_window)
        await engagement.toggle_like(article.id, "late", now=inside_window)

        summary = await aggregator.engagement_summary("7d", now=NOW)

        assert summary.total_views == 1
        assert summary.unique_visitors == 1
        assert summary.total_likes == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("label", ["all", "1y", "7D", ""])
    async def test_rejected_ranges(self, aggregator: AnalyticsAggregator, label: str) -> None:
        with pytest.raises(InvalidRangeError):
            await aggregator.engagement_summary(label, now=NOW)
