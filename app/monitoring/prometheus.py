"""
Prometheus metrics collection with cardinality protection.

This module provides Prometheus metrics for the Inkwell analytics backend:
- HTTP request metrics (handled by prometheus-fastapi-instrumentator)
- View events counted versus deduplicated
- Like events added versus removed
- Aggregation query duration per operation
- System metrics (CPU, memory, disk)

Security
--------
- Article IDs and client identities are NEVER used as labels
- Metrics endpoint access should be restricted to internal IPs

Examples
--------
>>> from app.monitoring.prometheus import metrics
>>> metrics.record_view(counted=True)
>>> metrics.observe_aggregation("dashboard_metrics", 0.042)
"""

from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from prometheus_fastapi_instrumentator import Instrumentator

from app.configs import settings

# Cardinality protection - NEVER use these as labels
HIGH_CARDINALITY_LABELS: frozenset[str] = frozenset(
    {
        "article_id",  # Unbounded unique values
        "identity",  # Client IP, PII
        "request_id",  # Unique per request
        "user_agent",  # Unbounded free text
        "full_path",  # Can include IDs like /analytics/articles/42
    },
)

MAX_LABEL_VALUE_LENGTH: int = 128

# Aggregations run a handful of grouped queries; buckets cover 5ms to 10s
AGGREGATION_BUCKETS: tuple[float, ...] = (
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    10.0,
)


class MetricsCollector:
    """
    Metrics collector for engagement events and analytics queries.

    Attributes
    ----------
    views_total : Counter
        View events by outcome (counted, deduplicated)
    likes_total : Counter
        Like toggles by outcome (added, removed, unchanged)
    storage_errors_total : Counter
        Engagement writes rolled back because of a storage failure
    aggregation_duration_seconds : Histogram
        Aggregation duration by operation
    system_cpu_percent : Gauge
        Current CPU usage percentage
    system_memory_percent : Gauge
        Current memory usage percentage
    system_disk_percent : Gauge
        Current disk usage percentage
    """

    def __init__(self) -> None:
        """Initialize the metrics collector with all custom metrics."""
        self.views_total = Counter(
            "inkwell_article_views_total",
            "View events received, by deduplication outcome",
            ["outcome"],  # counted, deduplicated
        )
        self.likes_total = Counter(
            "inkwell_article_likes_total",
            "Like toggles, by outcome",
            ["outcome"],  # added, removed, unchanged
        )
        self.storage_errors_total = Counter(
            "inkwell_engagement_storage_errors_total",
            "Engagement operations rolled back after a storage failure",
            ["operation"],
        )
        self.aggregation_duration_seconds = Histogram(
            "inkwell_aggregation_duration_seconds",
            "Analytics aggregation duration in seconds",
            ["operation"],
            buckets=AGGREGATION_BUCKETS,
        )

        # System metrics
        self.system_cpu_percent = Gauge(
            "inkwell_system_cpu_percent",
            "Current CPU usage percentage",
        )
        self.system_memory_percent = Gauge(
            "inkwell_system_memory_percent",
            "Current memory usage percentage",
        )
        self.system_disk_percent = Gauge(
            "inkwell_system_disk_percent",
            "Current disk usage percentage",
        )

    @staticmethod
    def _validate_label_value(value: str) -> str:
        """
        Truncate label values.

        Args:
            value: The label value to validate.

        Returns:
            Truncated value if needed.
        """
        if len(value) > MAX_LABEL_VALUE_LENGTH:
            return value[:MAX_LABEL_VALUE_LENGTH]
        return value

    def record_view(self, *, counted: bool) -> None:
        """
        Record the outcome of a view event.

        Examples:
        --------
        >>> metrics.record_view(counted=False)
        """
        self.views_total.labels(outcome="counted" if counted else "deduplicated").inc()

    def record_like(self, outcome: str) -> None:
        """
        Record the outcome of a like toggle.

        Args:
            outcome: One of added, removed, unchanged.
        """
        self.likes_total.labels(outcome=self._validate_label_value(outcome)).inc()

    def record_storage_error(self, operation: str) -> None:
        """Record an engagement write that failed and was rolled back."""
        self.storage_errors_total.labels(operation=self._validate_label_value(operation)).inc()

    def observe_aggregation(self, operation: str, duration: float) -> None:
        """
        Record the duration of one aggregation.

        Args:
            operation: Aggregation name (dashboard_metrics, top_articles, ...).
            duration: Duration in seconds.
        """
        operation = self._validate_label_value(operation)
        self.aggregation_duration_seconds.labels(operation=operation).observe(duration)

    def update_system_metrics(
        self,
        cpu_percent: float,
        memory_percent: float,
        disk_percent: float,
    ) -> None:
        """
        Update system metrics gauges.

        Examples:
        --------
        >>> metrics.update_system_metrics(45.2, 62.1, 30.5)
        """
        self.system_cpu_percent.set(cpu_percent)
        self.system_memory_percent.set(memory_percent)
        self.system_disk_percent.set(disk_percent)


# Global metrics collector instance
metrics = MetricsCollector()


def setup_prometheus(app: FastAPI) -> Instrumentator:
    """
    Set up Prometheus instrumentation for the FastAPI app.

    HTTP metrics are grouped by route template, so article IDs never become
    label values. ``/metrics`` is exposed only when ``ENABLE_METRICS`` is set.

    Args:
        app: The FastAPI application instance.

    Returns:
        Configured Instrumentator instance.
    """
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=False,  # Use settings instead of direct env var
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", "/health.*"],
        inprogress_name="inkwell_http_requests_inprogress",
        inprogress_labels=True,
    )

    if settings.ENABLE_METRICS:
        instrumentator.instrument(app)
        instrumentator.expose(
            app,
            endpoint="/metrics",
            include_in_schema=False,
            tags=["Monitoring"],
        )

    return instrumentator


def generate_metrics_response() -> tuple[bytes, str]:
    """
    Generate Prometheus metrics response.

    Returns:
        Tuple of (metrics_bytes, content_type).
    """
    return generate_latest(), CONTENT_TYPE_LATEST
