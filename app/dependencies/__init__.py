# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    AggregatorDep,
    EngagementDep,
    Visitor,
    VisitorDep,
    get_analytics_aggregator,
    get_engagement_service,
    get_visitor,
)

__all__ = [
    "AggregatorDep",
    "EngagementDep",
    "Visitor",
    "VisitorDep",
    "get_analytics_aggregator",
    "get_engagement_service",
    "get_visitor",
]
