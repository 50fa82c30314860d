# app/routes/analytics.py

"""
Analytics Routes.

Records article engagement and serves the analytics read models.

Summary
-------
Endpoints include:
  - Record a view
  - Toggle a like
  - Get like status for the caller
  - Dashboard metrics
  - Top articles
  - Per-article analytics
  - Engagement summary

Dependencies
------------
  - `EngagementDep`: Deduplication gate bound to the request's session.
  - `AggregatorDep`: Read-only aggregation engine bound to the request's session.
  - `VisitorDep`: Caller identity (client IP) and user agent.

Rate Limiting
-------------
All endpoints define explicit limits and include `429` response examples.
Write endpoints are limited more tightly than reads.
"""

from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response

from app.configs import file_logger
from app.configs.settings import DEFAULT_TOP_ARTICLES_LIMIT
from app.dependencies import AggregatorDep, EngagementDep, VisitorDep
from app.managers import limiter
from app.schemas import (
    ArticleAnalytics,
    DashboardMetrics,
    EngagementSummary,
    LikeResult,
    LikeStatus,
    TopArticlesResponse,
    ViewResult,
)

router = APIRouter(prefix="/analytics", tags=["📈 Analytics"])

logger = file_logger(getLogger(__name__))

RangeQuery = Annotated[str, Query(alias="range", description="One of 7d, 30d, all")]

NOT_FOUND_RESPONSE = {
    "description": "Article not found",
    "content": {
        "application/json": {
            "example": {
                "detail": "Article with ID 99999 not found",
                "code": "ARTICLE_NOT_FOUND",
            },
        },
    },
}
BAD_REQUEST_RESPONSE = {
    "description": "Invalid argument or range",
    "content": {
        "application/json": {
            "example": {
                "detail": "Invalid range '90d'. Range must be one of: 7d, 30d, all",
                "code": "INVALID_RANGE",
            },
        },
    },
}
RATE_LIMIT_RESPONSE = {
    "description": "Rate limit exceeded",
    "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
}


@router.post(
    "/articles/{article_id}/view",
    response_class=ORJSONResponse,
    response_model=ViewResult,
    summary="Record an article view",
    description=(
        "Record a view of the article by the calling client. A view counts at most "
        "once per client per calendar day; repeats return `counted: false`."
    ),
    responses={
        200: {"content": {"application/json": {"example": {"counted": True}}}},
        400: BAD_REQUEST_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="analytics_record_view",
)
@limiter.limit("60/minute")
async def record_view(
    request: Request,
    response: Response,
    article_id: int,
    visitor: VisitorDep,
    service: EngagementDep,
) -> ViewResult:
    """
    Record a view.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    article_id : int
        Viewed article.
    visitor : Visitor
        Caller identity and user agent.
    service : EngagementService
        Engagement service dependency.

    Returns
    -------
    ViewResult
        Whether the view was counted.
    """
    return await service.record_view(article_id, visitor.identity, visitor.user_agent)


@router.post(
    "/articles/{article_id}/like",
    response_class=ORJSONResponse,
    response_model=LikeResult,
    summary="Toggle an article like",
    description="Like the article, or remove the like if the calling client already liked it.",
    responses={
        200: {"content": {"application/json": {"example": {"liked": True}}}},
        400: BAD_REQUEST_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="analytics_toggle_like",
)
@limiter.limit("30/minute")
async def toggle_like(
    request: Request,
    response: Response,
    article_id: int,
    visitor: VisitorDep,
    service: EngagementDep,
) -> LikeResult:
    """
    Toggle a like.

    Returns
    -------
    LikeResult
        Like state after the toggle.
    """
    return await service.toggle_like(article_id, visitor.identity, visitor.user_agent)


@router.get(
    "/articles/{article_id}/status",
    response_class=ORJSONResponse,
    response_model=LikeStatus,
    summary="Get like status",
    description="Report whether the calling client currently likes the article.",
    responses={
        200: {
            "content": {"application/json": {"example": {"articleId": 42, "hasLiked": True}}},
        },
        404: NOT_FOUND_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="analytics_like_status",
)
@limiter.limit("120/minute")
async def like_status(
    request: Request,
    response: Response,
    article_id: int,
    visitor: VisitorDep,
    service: EngagementDep,
) -> LikeStatus:
    return await service.like_status(article_id, visitor.identity)


@router.get(
    "/dashboard",
    response_class=ORJSONResponse,
    response_model=DashboardMetrics,
    summary="Dashboard metrics",
    description=(
        "Site-wide totals, the most recent and most viewed published articles, "
        "and a zero-filled daily views trend over the requested range."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "totalArticles": 24,
                        "totalViews": 5120,
                        "totalLikes": 311,
                        "recentArticles": [],
                        "topArticles": [],
                        "viewsTrend": [{"date": "2026-02-13", "views": 87}],
                        "dateRange": {
                            "range": "7d",
                            "period": "7 days",
                            "start": "2026-02-07T00:00:00Z",
                            "end": "2026-02-13T15:00:00Z",
                        },
                        "generatedAt": "2026-02-13T15:00:00Z",
                    },
                },
            },
        },
        400: BAD_REQUEST_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="analytics_dashboard",
)
@limiter.limit("30/minute")
async def dashboard(
    request: Request,
    response: Response,
    aggregator: AggregatorDep,
    range_label: RangeQuery = "all",
) -> DashboardMetrics:
    """
    Dashboard metrics.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    aggregator : AnalyticsAggregator
        Aggregation dependency.
    range_label : str
        Date range label.

    Returns
    -------
    DashboardMetrics
        Dashboard read model.
    """
    return await aggregator.dashboard_metrics(range_label)


@router.get(
    "/articles/top",
    response_class=ORJSONResponse,
    response_model=TopArticlesResponse,
    summary="Top articles",
    description="Published articles ranked by views, then likes, then ID.",
    responses={
        400: BAD_REQUEST_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="analytics_top_articles",
)
@limiter.limit("60/minute")
async def top_articles(
    request: Request,
    response: Response,
    aggregator: AggregatorDep,
    limit: Annotated[int, Query(description="Number of articles (1-50)")] = (
        DEFAULT_TOP_ARTICLES_LIMIT
    ),
    range_label: RangeQuery = "all",
) -> TopArticlesResponse:
    return await aggregator.top_articles(limit, range_label)


@router.get(
    "/articles/{article_id}",
    response_class=ORJSONResponse,
    response_model=ArticleAnalytics,
    summary="Article analytics",
    description="An article's counters and its daily views and likes trend.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "article": {
                            "id": 42,
                            "title": "Understanding Async SQLAlchemy",
                            "slug": "understanding-async-sqlalchemy",
                            "status": "published",
                            "viewCount": 120,
                            "likeCount": 8,
                            "publishedAt": "2026-01-05T09:00:00+00:00",
                        },
                        "days": 2,
                        "trend": [
                            {"date": "2026-02-12", "views": 4, "likes": 0},
                            {"date": "2026-02-13", "views": 7, "likes": 1},
                        ],
                    },
                },
            },
        },
        400: BAD_REQUEST_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="analytics_article",
)
@limiter.limit("60/minute")
async def article_analytics(
    request: Request,
    response: Response,
    article_id: int,
    aggregator: AggregatorDep,
    days: Annotated[int | None, Query(description="Trend length in days (1-365)")] = None,
) -> ArticleAnalytics:
    return await aggregator.article_analytics(article_id, days)


@router.get(
    "/engagement",
    response_class=ORJSONResponse,
    response_model=EngagementSummary,
    summary="Engagement summary",
    description="Views, unique visitors and likes over the last 7 or 30 days.",
    responses={
        400: BAD_REQUEST_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="analytics_engagement",
)
@limiter.limit("30/minute")
async def engagement_summary(
    request: Request,
    response: Response,
    aggregator: AggregatorDep,
    range_label: RangeQuery = "7d",
) -> EngagementSummary:
    return await aggregator.engagement_summary(range_label)
