from logging import getLogger

from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR, HTTP_503_SERVICE_UNAVAILABLE

from app.configs import file_logger
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
        code: str = "DATABASE_ERROR",
    ) -> None:
        super().__init__(detail, status_code, code)


class StorageError(DatabaseError):
    """
    Exception raised when the event store or counters cannot be read or written.

    The failed unit of work has already been rolled back when this is raised;
    it is never retried automatically.
    """

    def __init__(
        self,
        detail: str = "Storage operation failed",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_ERROR")


class DatabaseConnectionError(DatabaseError):
    """Exception raised when the database cannot be reached."""

    def __init__(
        self,
        detail: str = "Could not connect to the database",
    ) -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE, "DATABASE_CONNECTION_ERROR")


class DatabaseConfigurationError(DatabaseError):
    """Exception raised when database configuration is invalid."""

    def __init__(
        self,
        detail: str = "Invalid database configuration",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_CONFIGURATION_ERROR")


class DatabaseInitializationError(DatabaseError):
    """Exception raised when database initialization fails."""

    def __init__(
        self,
        detail: str = "Failed to initialize database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_INITIALIZATION_ERROR")


database_exception_handler = create_exception_handler(logger)
