"""
Kubernetes-compatible health checks with dependency validation.

This module provides health check endpoints compatible with Kubernetes probes:
- /health/live (Liveness): Basic app responsiveness - no external deps
- /health/ready (Readiness): Database and disk checks

Timeouts
--------
- Database: 2 seconds

Response Format
---------------
All endpoints return JSON with the following structure:
{
    "status": "ready" | "not_ready" | "error",
    "timestamp": "2025-01-01T12:00:00Z",
    "version": "1.0.0",
    "checks": {
        "database": {"status": "pass", "response_ms": 15},
        "disk": {"status": "pass", "usage_percent": 45}
    }
}

Examples
--------
>>> from app.monitoring.health import HealthChecker
>>> checker = HealthChecker(app)
>>> status = await checker.check_readiness()
>>> if status.is_healthy:
...     print("Service is ready")
"""

from asyncio import wait_for
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from time import perf_counter
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import ORJSONResponse
from psutil import disk_usage
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from app.db.database import transaction
from app.utils.helpers import today_str

# Health check timeouts (seconds)
HEALTH_CHECK_TIMEOUTS: dict[str, float] = {
    "database": 2.0,
}

# Disk usage thresholds (percent)
DISK_WARN_PERCENT = 90
DISK_FAIL_PERCENT = 95


class CheckStatus(StrEnum):
    """Status values for individual health checks."""

    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"


class OverallStatus(StrEnum):
    """Overall health status."""

    READY = "ready"
    NOT_READY = "not_ready"
    ERROR = "error"
    LIVE = "live"


@dataclass
class ComponentCheck:
    """
    Result of an individual health check component.

    Attributes
    ----------
    status : CheckStatus
        Status of the check (pass, fail, warn)
    response_ms : int | None
        Response time in milliseconds
    message : str | None
        Optional message or error details
    details : dict[str, Any]
        Additional check-specific details
    """

    status: CheckStatus
    response_ms: int | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary representation of the check.
        """
        result: dict[str, Any] = {"status": self.status.value}
        if self.response_ms is not None:
            result["response_ms"] = self.response_ms
        if self.message is not None:
            result["message"] = self.message
        if self.details:
            result.update(self.details)
        return result


@dataclass
class HealthStatus:
    """
    Complete health status response.

    Attributes
    ----------
    status : OverallStatus
        Overall health status
    timestamp : str
        ISO format timestamp
    version : str
        Application version
    checks : dict[str, ComponentCheck]
        Individual component checks
    """

    status: OverallStatus
    timestamp: str
    version: str
    checks: dict[str, ComponentCheck] = field(default_factory=dict)

    @property
    def is_healthy(self) -> bool:
        """
        Check if overall status is healthy.

        Returns:
            True if status is ready or live.
        """
        return self.status in (OverallStatus.READY, OverallStatus.LIVE)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format for JSON response.

        Returns:
            Dictionary representation of health status.
        """
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
        }


class HealthChecker:
    """
    Health checker for Kubernetes-compatible probes.

    Examples
    --------
    >>> checker = HealthChecker(app)
    >>> liveness = checker.check_liveness()
    >>> readiness = await checker.check_readiness()
    """

    def __init__(self, app: FastAPI, version: str = "1.0.0") -> None:
        """
        Initialize the health checker.

        Args:
            app: FastAPI application instance.
            version: Application version string.
        """
        self.app = app
        self.version = version

    def check_liveness(self) -> HealthStatus:
        """
        Check liveness - basic app responsiveness only.

        This check does not depend on the database; Kubernetes restarts the
        pod if it fails.
        """
        return HealthStatus(
            status=OverallStatus.LIVE,
            timestamp=today_str(),
            version=self.version,
            checks={},
        )

    async def check_readiness(self) -> HealthStatus:
        """
        Check readiness - verify the database and disk.

        Kubernetes stops routing traffic if this fails.

        Returns:
            HealthStatus with readiness information.
        """
        checks: dict[str, ComponentCheck] = {
            "database": await self._check_database(),
            "disk": self._check_disk(),
        }
        failed = any(check.status == CheckStatus.FAIL for check in checks.values())

        return HealthStatus(
            status=OverallStatus.NOT_READY if failed else OverallStatus.READY,
            timestamp=datetime.now(UTC).isoformat(),
            version=self.version,
            checks=checks,
        )

    async def _check_database(self) -> ComponentCheck:
        """Run ``SELECT 1`` against the database with a timeout."""

        start = perf_counter()
        try:
            async with transaction() as session:
                await wait_for(
                    session.execute(text("SELECT 1")),
                    timeout=HEALTH_CHECK_TIMEOUTS["database"],
                )

            return ComponentCheck(status=CheckStatus.PASS, response_ms=_elapsed_ms(start))
        except TimeoutError:
            return ComponentCheck(
                status=CheckStatus.FAIL,
                response_ms=_elapsed_ms(start),
                message="Database check timed out",
            )
        except (SQLAlchemyError, OSError) as e:
            return ComponentCheck(
                status=CheckStatus.FAIL,
                response_ms=_elapsed_ms(start),
                message=f"Database check failed: {type(e).__name__}",
            )

    def _check_disk(self) -> ComponentCheck:
        """Check disk space usage."""

        try:
            usage_percent = disk_usage("/").percent
        except OSError as e:
            return ComponentCheck(
                status=CheckStatus.WARN,
                message=f"Could not check disk: {e!s}",
            )

        if usage_percent > DISK_FAIL_PERCENT:
            status = CheckStatus.FAIL
        elif usage_percent > DISK_WARN_PERCENT:
            status = CheckStatus.WARN
        else:
            status = CheckStatus.PASS

        return ComponentCheck(status=status, details={"usage_percent": usage_percent})


def _elapsed_ms(start: float) -> int:
    return int((perf_counter() - start) * 1000)


def perform_liveness_check(app: FastAPI) -> HealthStatus:
    """Run the liveness probe for ``app``."""
    return HealthChecker(app, version=app.version).check_liveness()


async def perform_readiness_check(app: FastAPI) -> HealthStatus:
    """Run the readiness probe for ``app``."""
    return await HealthChecker(app, version=app.version).check_readiness()


def setup_health_routes(app: FastAPI) -> None:
    """
    Register ``/health/live`` and ``/health/ready`` on ``app``.

    Readiness answers 503 when any check fails.
    """
    router = APIRouter(prefix="/health", tags=["🩺 Health"])

    @router.get("/live", response_class=ORJSONResponse, summary="Liveness probe")
    async def liveness(request: Request) -> ORJSONResponse:
        return ORJSONResponse(perform_liveness_check(request.app).to_dict())

    @router.get("/ready", response_class=ORJSONResponse, summary="Readiness probe")
    async def readiness(request: Request) -> ORJSONResponse:
        status = await perform_readiness_check(request.app)
        status_code = HTTP_200_OK if status.is_healthy else HTTP_503_SERVICE_UNAVAILABLE
        return ORJSONResponse(status.to_dict(), status_code=status_code)

    app.include_router(router)
