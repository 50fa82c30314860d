"""
Aggregation engine: read-only analytics over articles and engagement events.

Counter-based figures (totals, rankings) read the denormalized article
counters. Time-windowed figures (trends, engagement summary) read the event
tables directly. Nothing here writes.
"""

from datetime import date, datetime
from logging import getLogger

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import file_logger, settings
from app.configs.settings import (
    DASHBOARD_RECENT_ARTICLES,
    DASHBOARD_TOP_ARTICLES,
    DEFAULT_TOP_ARTICLES_LIMIT,
    MAX_TOP_ARTICLES_LIMIT,
    MAX_TREND_DAYS,
    MIN_TOP_ARTICLES_LIMIT,
)
from app.decorators.metrics import timed
from app.errors.analytics import InvalidArgumentError
from app.errors.database import StorageError
from app.models.article import ArticleDB
from app.repositories.article import ArticleRepository
from app.repositories.engagement import EngagementRepository
from app.schemas.analytics import (
    ArticleAnalytics,
    ArticleSummary,
    ArticleTrendPoint,
    DashboardMetrics,
    DateRangeInfo,
    EngagementSummary,
    TopArticlesResponse,
    TrendPoint,
)
from app.services.date_range import DateRange, ResolvedRange, parse_range, resolve_range
from app.services.engagement import validate_article_id
from app.services.trends import trailing_days, zero_filled
from app.utils.timezone import ensure_aware, utc_now

logger = file_logger(getLogger(__name__))

SUMMARY_RANGES: tuple[str, ...] = (DateRange.LAST_7_DAYS.value, DateRange.LAST_30_DAYS.value)


def to_summary(article: ArticleDB) -> ArticleSummary:
    return ArticleSummary.model_validate(article, from_attributes=True)


def range_info(window: ResolvedRange) -> DateRangeInfo:
    return DateRangeInfo(
        range=window.label.value,
        period=window.period,
        start=window.start,
        end=window.end,
    )


def average_views(total_views: int, unique_visitors: int) -> float:
    """
    Average views per visitor, rounded to two decimals.

    Returns 0 when there are no visitors.
    """
    if unique_visitors == 0:
        return 0.0
    return round(total_views / unique_visitors, 2)


class AnalyticsAggregator:
    """Computes dashboard, ranking, per-article and engagement aggregates."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the aggregator.

        Args:
            session: Async database session
        """
        self.session = session
        self.articles = ArticleRepository(session)
        self.events = EngagementRepository(session)

    @timed("dashboard_metrics")
    async def dashboard_metrics(
        self,
        range_label: str = DateRange.ALL_TIME.value,
        now: datetime | None = None,
    ) -> DashboardMetrics:
        """
        Build the site-wide dashboard.

        Totals cover every article. Recent and top lists only contain
        published articles and ignore the range. Only the views trend is
        range-scoped: zero-filled over the window, or from the first recorded
        view for "all".

        Raises:
            InvalidRangeError: If the range label is unknown
            StorageError: If a query fails
        """
        window = resolve_range(range_label, now if now is not None else utc_now())

        try:
            total_articles, total_views, total_likes = await self.articles.totals()
            recent = await self.articles.get_recent_published(DASHBOARD_RECENT_ARTICLES)
            top = await self.articles.get_top_ranked(DASHBOARD_TOP_ARTICLES)
            trend = await self._views_trend(window)
        except SQLAlchemyError as e:
            logger.exception("Failed to compute dashboard metrics")
            mssg = "Failed to compute dashboard metrics"
            raise StorageError(mssg) from e

        return DashboardMetrics(
            total_articles=total_articles,
            total_views=total_views,
            total_likes=total_likes,
            recent_articles=[to_summary(article) for article in recent],
            top_articles=[to_summary(article) for article in top],
            views_trend=trend,
            date_range=range_info(window),
            generated_at=window.end,
        )

    async def _views_trend(self, window: ResolvedRange) -> list[TrendPoint]:
        start_day: date | None = window.start_day
        if start_day is None:
            start_day = await self.events.first_view_day()
            if start_day is None:
                return []

        counts = await self.events.daily_views(start_day, window.end_day)
        return [
            TrendPoint(day=day, views=views)
            for day, views in zero_filled(counts, start_day, window.end_day)
        ]

    @timed("top_articles")
    async def top_articles(
        self,
        limit: int = DEFAULT_TOP_ARTICLES_LIMIT,
        range_label: str = DateRange.ALL_TIME.value,
        now: datetime | None = None,
    ) -> TopArticlesResponse:
        """
        Rank published articles by views, then likes, then id.

        Args:
            limit: Number of articles, between 1 and 50
            range_label: Restrict to articles published inside this window
            now: Reference time (defaults to the current time)

        Raises:
            InvalidArgumentError: If limit is out of bounds
            InvalidRangeError: If the range label is unknown
            StorageError: If the query fails
        """
        if (
            isinstance(limit, bool)
            or not isinstance(limit, int)
            or not MIN_TOP_ARTICLES_LIMIT <= limit <= MAX_TOP_ARTICLES_LIMIT
        ):
            mssg = (
                f"Limit must be between {MIN_TOP_ARTICLES_LIMIT} and "
                f"{MAX_TOP_ARTICLES_LIMIT}, got {limit!r}"
            )
            raise InvalidArgumentError(mssg)

        window = resolve_range(range_label, now if now is not None else utc_now())

        try:
            ranked = await self.articles.get_top_ranked(limit, published_since=window.start)
        except SQLAlchemyError as e:
            logger.exception("Failed to rank articles")
            mssg = "Failed to rank articles"
            raise StorageError(mssg) from e

        return TopArticlesResponse(
            articles=[to_summary(article) for article in ranked],
            limit=limit,
            date_range=range_info(window),
        )

    @timed("article_analytics")
    async def article_analytics(
        self,
        article_id: int,
        days: int | None = None,
        now: datetime | None = None,
    ) -> ArticleAnalytics:
        """
        Return one article's counters with a daily views and likes trend.

        The trend has exactly ``days`` points, ascending, ending today, with
        days without events reported as zero.

        Raises:
            InvalidArgumentError: If the article ID or ``days`` is malformed
            ArticleNotFoundError: If the article does not exist
            StorageError: If a query fails
        """
        article_id = validate_article_id(article_id)
        days = settings.ARTICLE_TREND_DAYS if days is None else days
        if isinstance(days, bool) or not isinstance(days, int) or not 1 <= days <= MAX_TREND_DAYS:
            mssg = f"Days must be between 1 and {MAX_TREND_DAYS}, got {days!r}"
            raise InvalidArgumentError(mssg)

        reference = ensure_aware(now) if now is not None else utc_now()
        window = resolve_range(DateRange.ALL_TIME.value, reference)
        start_day, end_day = trailing_days(window.end_day, days)

        try:
            article = await self.articles.get_or_raise(article_id)
            views = await self.events.daily_views(start_day, end_day, article_id=article_id)
            likes = await self.events.daily_likes(start_day, end_day, article_id=article_id)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to compute analytics for article {article_id}")
            mssg = f"Failed to compute analytics for article {article_id}"
            raise StorageError(mssg) from e

        trend = [
            ArticleTrendPoint(day=day, views=day_views, likes=likes.get(day, 0))
            for day, day_views in zero_filled(views, start_day, end_day)
        ]
        return ArticleAnalytics(article=to_summary(article), days=days, trend=trend)

    @timed("engagement_summary")
    async def engagement_summary(
        self,
        range_label: str = DateRange.LAST_7_DAYS.value,
        now: datetime | None = None,
    ) -> EngagementSummary:
        """
        Summarize engagement events inside a recent window.

        Only "7d" and "30d" are accepted. Views and likes are counted from
        the event tables over ``[start, end)``.

        Raises:
            InvalidRangeError: If the range label is not "7d" or "30d"
            StorageError: If a query fails
        """
        parse_range(range_label, SUMMARY_RANGES)
        window = resolve_range(range_label, now if now is not None else utc_now())

        try:
            articles_viewed, total_views, unique_visitors = await self.events.view_window_summary(
                window.start,
                window.end,
            )
            total_likes = await self.events.count_likes_between(window.start, window.end)
        except SQLAlchemyError as e:
            logger.exception("Failed to compute engagement summary")
            mssg = "Failed to compute engagement summary"
            raise StorageError(mssg) from e

        return EngagementSummary(
            period=window.period,
            articles_viewed=articles_viewed,
            total_views=total_views,
            unique_visitors=unique_visitors,
            total_likes=total_likes,
            avg_views_per_visitor=average_views(total_views, unique_visitors),
        )
