from app.errors.analytics import (
    AnalyticsError,
    ArticleNotFoundError,
    InvalidArgumentError,
    InvalidRangeError,
    analytics_exception_handler,
)
from app.errors.base import BaseAppError, create_exception_handler
from app.errors.database import (
    DatabaseConfigurationError,
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    StorageError,
    database_exception_handler,
)
from app.errors.validation import validation_exception_handler

__all__ = [
    "AnalyticsError",
    "ArticleNotFoundError",
    "BaseAppError",
    "DatabaseConfigurationError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "InvalidArgumentError",
    "InvalidRangeError",
    "StorageError",
    "analytics_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "validation_exception_handler",
]
