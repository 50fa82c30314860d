"""
Date range resolution for analytics queries.

A range label ("7d", "30d", "all") is turned into a concrete window ending at
the reference time. Windows are calendar-aligned in the analytics timezone:
"7d" covers today and the six days before it, starting at local midnight.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import StrEnum

from app.errors.analytics import InvalidRangeError
from app.utils.timezone import calendar_day, ensure_aware, start_of_day


class DateRange(StrEnum):
    """Supported range labels."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    ALL_TIME = "all"

    @property
    def days(self) -> int | None:
        """Window length in calendar days, None for all time."""
        return _RANGE_DAYS[self]

    @property
    def period(self) -> str:
        """Human readable description of the window."""
        return "all time" if self.days is None else f"{self.days} days"


_RANGE_DAYS: dict[DateRange, int | None] = {
    DateRange.LAST_7_DAYS: 7,
    DateRange.LAST_30_DAYS: 30,
    DateRange.ALL_TIME: None,
}

ALLOWED_LABELS: tuple[str, ...] = tuple(member.value for member in DateRange)


@dataclass(frozen=True, slots=True)
class ResolvedRange:
    """
    A concrete ``[start, end)`` window.

    Attributes:
        label: The range the window was resolved from
        start: Inclusive lower bound, None meaning unbounded
        end: Exclusive upper bound (the reference time)
    """

    label: DateRange
    start: datetime | None
    end: datetime

    @property
    def days(self) -> int | None:
        return self.label.days

    @property
    def period(self) -> str:
        return self.label.period

    @property
    def start_day(self) -> date | None:
        """First calendar day of the window, None when unbounded."""
        return None if self.start is None else calendar_day(self.start)

    @property
    def end_day(self) -> date:
        """Calendar day of the reference time."""
        return calendar_day(self.end)


def parse_range(label: object, allowed: tuple[str, ...] = ALLOWED_LABELS) -> DateRange:
    """
    Parse a range label, case-sensitively.

    Raises:
        InvalidRangeError: If ``label`` is not one of ``allowed``
    """
    if not isinstance(label, str) or label not in allowed:
        raise InvalidRangeError(label, allowed)
    return DateRange(label)


def resolve_range(label: object, now: datetime) -> ResolvedRange:
    """
    Resolve ``label`` into a window ending at ``now``.

    Args:
        label: One of "7d", "30d" or "all"
        now: Reference time; naive values are taken as UTC

    Returns:
        ResolvedRange: The concrete window

    Raises:
        InvalidRangeError: If the label is not recognized

    Example:
        >>> window = resolve_range("7d", datetime(2026, 2, 13, 15, 0, tzinfo=UTC))
        >>> window.start
        datetime.datetime(2026, 2, 7, 0, 0, tzinfo=datetime.timezone.utc)
    """
    date_range = parse_range(label)
    end = ensure_aware(now)
    if date_range.days is None:
        return ResolvedRange(label=date_range, start=None, end=end)

    first_day = calendar_day(end) - timedelta(days=date_range.days - 1)
    return ResolvedRange(label=date_range, start=start_of_day(first_day), end=end)
