from app.schemas.analytics import (
    ArticleAnalytics,
    ArticleSummary,
    ArticleTrendPoint,
    DashboardMetrics,
    DateRangeInfo,
    EngagementSummary,
    LikeResult,
    LikeStatus,
    TopArticlesResponse,
    TrendPoint,
    ViewResult,
)

__all__ = [
    "ArticleAnalytics",
    "ArticleSummary",
    "ArticleTrendPoint",
    "DashboardMetrics",
    "DateRangeInfo",
    "EngagementSummary",
    "LikeResult",
    "LikeStatus",
    "TopArticlesResponse",
    "TrendPoint",
    "ViewResult",
]
