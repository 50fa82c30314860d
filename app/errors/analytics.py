"""Expected, validated failure conditions of the engagement-analytics core."""

from logging import getLogger

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from app.configs import file_logger
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class AnalyticsError(BaseAppError):
    """Base exception for analytics errors."""

    def __init__(
        self,
        detail: str = "Analytics Error",
        status_code: int = HTTP_400_BAD_REQUEST,
        code: str = "ANALYTICS_ERROR",
    ) -> None:
        super().__init__(detail, status_code, code)


class ArticleNotFoundError(AnalyticsError):
    """Exception raised when the referenced article does not exist."""

    def __init__(self, article_id: int | None = None) -> None:
        detail = "Article not found"
        if article_id is not None:
            detail = f"Article with ID {article_id} not found"
        super().__init__(detail, HTTP_404_NOT_FOUND, "ARTICLE_NOT_FOUND")


class InvalidArgumentError(AnalyticsError):
    """Exception raised for a malformed article id, identity, limit or delta."""

    def __init__(self, detail: str = "Invalid argument") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST, "INVALID_ARGUMENT")


class InvalidRangeError(AnalyticsError):
    """Exception raised for an unrecognized date range label."""

    def __init__(
        self,
        label: object = None,
        allowed: tuple[str, ...] = ("7d", "30d", "all"),
    ) -> None:
        detail = f"Range must be one of: {', '.join(allowed)}"
        if label is not None:
            detail = f"Invalid range '{label}'. {detail}"
        super().__init__(detail, HTTP_400_BAD_REQUEST, "INVALID_RANGE")


analytics_exception_handler = create_exception_handler(logger)
