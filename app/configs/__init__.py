from app.configs.settings import (
    LimiterConfig,
    file_logger,
    pool_kwargs,
    settings,
)

__all__ = [
    "LimiterConfig",
    "file_logger",
    "pool_kwargs",
    "settings",
]
