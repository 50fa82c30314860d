from app.services.aggregation import AnalyticsAggregator
from app.services.date_range import DateRange, ResolvedRange, resolve_range
from app.services.engagement import EngagementService

__all__ = [
    "AnalyticsAggregator",
    "DateRange",
    "EngagementService",
    "ResolvedRange",
    "resolve_range",
]
