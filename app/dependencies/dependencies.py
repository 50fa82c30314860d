# app/dependencies/dependencies.py

"""Request-scoped dependencies for the analytics routes."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_session
from app.services import AnalyticsAggregator, EngagementService
from app.utils.helpers import host, user_agent


def get_engagement_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> EngagementService:
    """
    Resolve the `EngagementService` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    EngagementService
        Service bound to the session.
    """
    return EngagementService(session)


def get_analytics_aggregator(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AnalyticsAggregator:
    """Resolve the `AnalyticsAggregator` dependency."""
    return AnalyticsAggregator(session)


@dataclass(frozen=True)
class Visitor:
    """
    Who is engaging with an article.

    Parameters
    ----------
    identity : str
        Deduplication identity (client IP, proxy headers already applied).
    user_agent : str | None
        Raw user agent header.
    """

    identity: str
    user_agent: str | None = None


def get_visitor(request: Request) -> Visitor:
    return Visitor(identity=host(request), user_agent=user_agent(request))


EngagementDep = Annotated[EngagementService, Depends(get_engagement_service)]
AggregatorDep = Annotated[AnalyticsAggregator, Depends(get_analytics_aggregator)]
VisitorDep = Annotated[Visitor, Depends(get_visitor)]
