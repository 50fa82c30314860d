from collections.abc import Awaitable, Callable
from functools import wraps
from time import perf_counter
from typing import ParamSpec, TypeVar

from app.monitoring.prometheus import MetricsCollector
from app.monitoring.prometheus import metrics as default_metrics

# Type variables for generic decorator
P = ParamSpec("P")
R = TypeVar("R")


def timed(
    operation: str | None = None,
    metrics: MetricsCollector | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Time async functions into the aggregation duration histogram.

    The duration is recorded whether the call returns or raises.

    Args:
        operation: Histogram label (defaults to function name).
        metrics: Optional metrics collector (defaults to global instance).

    Returns:
        Decorated function with timing instrumentation.

    Example:
        @timed("top_articles")
        async def top_articles(self, limit: int) -> TopArticlesResponse:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        op = operation or func.__name__

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            collector = metrics or default_metrics
            start = perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                collector.observe_aggregation(op, perf_counter() - start)

        return wrapper

    return decorator
