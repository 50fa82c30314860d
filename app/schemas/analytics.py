"""
Response models for engagement analytics.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.utils.timezone import ensure_aware


class ViewResult(BaseModel):
    """Outcome of a view event."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"counted": True}},
    )

    counted: bool = Field(
        ...,
        description="True if the view was new for this identity today",
    )


class LikeResult(BaseModel):
    """Outcome of a like toggle."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"liked": True}},
    )

    liked: bool = Field(..., description="Like state of the identity after the toggle")


class LikeStatus(BaseModel):
    """Whether an identity currently likes an article."""

    model_config = ConfigDict(populate_by_name=True)

    article_id: int = Field(alias="articleId")
    has_liked: bool = Field(alias="hasLiked")


class ArticleSummary(BaseModel):
    """Article fields shown in analytics listings."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    title: str
    slug: str
    status: str
    view_count: int = Field(alias="viewCount")
    like_count: int = Field(alias="likeCount")
    published_at: datetime | None = Field(default=None, alias="publishedAt")

    @field_serializer("published_at")
    def serialize_published_at(self, value: datetime | None) -> str | None:
        return None if value is None else ensure_aware(value).isoformat()


class DateRangeInfo(BaseModel):
    """The window a response was computed over."""

    model_config = ConfigDict(populate_by_name=True)

    range: str = Field(..., examples=["7d"])
    period: str = Field(..., examples=["7 days"])
    start: datetime | None = Field(default=None, description="Inclusive start, null for all time")
    end: datetime = Field(..., description="Exclusive end (time of the request)")


class TrendPoint(BaseModel):
    """Views on one calendar day."""

    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    views: int = 0


class ArticleTrendPoint(BaseModel):
    """Views and likes on one calendar day."""

    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    views: int = 0
    likes: int = 0


class DashboardMetrics(BaseModel):
    """Site-wide engagement overview."""

    model_config = ConfigDict(populate_by_name=True)

    total_articles: int = Field(alias="totalArticles")
    total_views: int = Field(alias="totalViews")
    total_likes: int = Field(alias="totalLikes")
    recent_articles: list[ArticleSummary] = Field(default_factory=list, alias="recentArticles")
    top_articles: list[ArticleSummary] = Field(default_factory=list, alias="topArticles")
    views_trend: list[TrendPoint] = Field(default_factory=list, alias="viewsTrend")
    date_range: DateRangeInfo = Field(alias="dateRange")
    generated_at: datetime = Field(alias="generatedAt")


class TopArticlesResponse(BaseModel):
    """Articles ranked by views, then likes, then id."""

    model_config = ConfigDict(populate_by_name=True)

    articles: list[ArticleSummary] = Field(default_factory=list)
    limit: int
    date_range: DateRangeInfo = Field(alias="dateRange")


class ArticleAnalytics(BaseModel):
    """One article's counters and its daily trend."""

    model_config = ConfigDict(populate_by_name=True)

    article: ArticleSummary
    days: int
    trend: list[ArticleTrendPoint] = Field(default_factory=list)


class EngagementSummary(BaseModel):
    """Engagement totals over a recent window."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "period": "7 days",
                "articlesViewed": 12,
                "totalViews": 340,
                "uniqueVisitors": 150,
                "totalLikes": 21,
                "avgViewsPerVisitor": 2.27,
            },
        },
    )

    period: str
    articles_viewed: int = Field(alias="articlesViewed")
    total_views: int = Field(alias="totalViews")
    unique_visitors: int = Field(alias="uniqueVisitors")
    total_likes: int = Field(alias="totalLikes")
    avg_views_per_visitor: float = Field(alias="avgViewsPerVisitor")
