"""
Timezone utility functions for analytics calendar days.

Engagement events are stored with UTC timestamps, but deduplication and
trend bucketing work on calendar days in the configured analytics timezone.
"""

from datetime import UTC, date, datetime, time, timedelta
from functools import cache
from zoneinfo import ZoneInfo

from app.configs import settings


@cache
def analytics_zone(name: str | None = None) -> ZoneInfo:
    """
    Return the ``ZoneInfo`` used for calendar-day bucketing.

    Args:
        name: IANA timezone name (defaults to ``settings.ANALYTICS_TIMEZONE``).

    Returns:
        ZoneInfo: Resolved timezone.
    """
    return ZoneInfo(name or settings.ANALYTICS_TIMEZONE)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def ensure_aware(dt: datetime) -> datetime:
    """
    Return ``dt`` as an aware UTC datetime.

    Naive values are taken to be UTC; aware values are converted, since
    SQLite drops the offset of stored timestamps.

    Example:
        >>> ensure_aware(datetime(2026, 2, 13, 15, 0))
        datetime.datetime(2026, 2, 13, 15, 0, tzinfo=datetime.timezone.utc)
    """
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def calendar_day(dt: datetime) -> date:
    """
    Return the calendar day of ``dt`` in the analytics timezone.

    Example:
        >>> calendar_day(datetime(2026, 2, 13, 23, 30, tzinfo=UTC))
        datetime.date(2026, 2, 13)
    """
    return ensure_aware(dt).astimezone(analytics_zone()).date()


def start_of_day(day: date) -> datetime:
    """Return local midnight of ``day`` in the analytics timezone, as UTC."""
    return datetime.combine(day, time.min, tzinfo=analytics_zone()).astimezone(UTC)


def day_span(start: date, end: date) -> list[date]:
    """
    Return every calendar day from ``start`` to ``end`` inclusive.

    Example:
        >>> day_span(date(2026, 2, 27), date(2026, 3, 1))
        [datetime.date(2026, 2, 27), datetime.date(2026, 2, 28), datetime.date(2026, 3, 1)]
    """
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
