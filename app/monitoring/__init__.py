"""
Monitoring and observability module for the Inkwell analytics backend.

This module provides the observability stack:
- Prometheus metrics collection
- Structured logging with PII sanitization
- Kubernetes-compatible health checks

Usage
-----
>>> from app.monitoring import setup_monitoring
>>> setup_monitoring(app)

Or import individual components:
>>> from app.monitoring.prometheus import metrics
>>> from app.monitoring.logging import get_logger, bind_request_id
>>> from app.monitoring.health import setup_health_routes
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from app.monitoring.health import (
    HealthChecker,
    HealthStatus,
    perform_liveness_check,
    perform_readiness_check,
    setup_health_routes,
)
from app.monitoring.logging import (
    bind_request_id,
    clear_context,
    configure_structlog,
    get_logger,
    get_request_id,
    redact_pii,
    sanitize_headers,
    sanitize_log_message,
)
from app.monitoring.prometheus import MetricsCollector, metrics, setup_prometheus

if TYPE_CHECKING:
    from fastapi import FastAPI
    from prometheus_fastapi_instrumentator import Instrumentator

logger = getLogger(__name__)

__all__ = [
    "HealthChecker",
    "HealthStatus",
    "MetricsCollector",
    "bind_request_id",
    "clear_context",
    "configure_structlog",
    "get_logger",
    "get_request_id",
    "metrics",
    "perform_liveness_check",
    "perform_readiness_check",
    "redact_pii",
    "sanitize_headers",
    "sanitize_log_message",
    "setup_health_routes",
    "setup_monitoring",
    "setup_prometheus",
]

# Module-level state
_instrumentator: Instrumentator | None = None


def setup_monitoring(app: FastAPI, *, configure_logging: bool = True) -> None:
    """
    Set up all monitoring components for the FastAPI application.

    This function initializes:
    1. Structlog for structured logging
    2. Prometheus metrics with FastAPI instrumentator
    3. Kubernetes health check endpoints

    Parameters
    ----------
    app : FastAPI
        The FastAPI application instance.
    configure_logging : bool
        Whether to (re)configure root logging. Default True.
    """
    global _instrumentator

    if configure_logging:
        configure_structlog()
        logger.info("Structlog configured")

    if _instrumentator is None:
        _instrumentator = setup_prometheus(app)
        logger.info("Prometheus metrics configured")

    setup_health_routes(app)
    logger.info("Health check routes configured")
