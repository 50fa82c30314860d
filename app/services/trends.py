"""Zero-filled daily series built from sparse per-day counts."""

from collections.abc import Mapping
from datetime import date, timedelta

from app.utils.timezone import day_span


def zero_filled(counts: Mapping[date, int], start: date, end: date) -> list[tuple[date, int]]:
    """
    Return one ``(day, count)`` pair per day from ``start`` to ``end``.

    Days missing from ``counts`` get 0.

    Example:
        >>> zero_filled({date(2026, 2, 2): 3}, date(2026, 2, 1), date(2026, 2, 3))
        [(datetime.date(2026, 2, 1), 0), (datetime.date(2026, 2, 2), 3), (datetime.date(2026, 2, 3), 0)]
    """
    return [(day, counts.get(day, 0)) for day in day_span(start, end)]


def trailing_days(end: date, days: int) -> tuple[date, date]:
    """Return the first and last day of the ``days``-long window ending on ``end``."""
    return end - timedelta(days=days - 1), end
