"""Utility helper functions."""

from app.utils.helpers import get_summary, host, today_str, user_agent
from app.utils.timezone import calendar_day, day_span, ensure_aware, start_of_day, utc_now

__all__ = [
    "calendar_day",
    "day_span",
    "ensure_aware",
    "get_summary",
    "host",
    "start_of_day",
    "today_str",
    "user_agent",
    "utc_now",
]
