from app.managers.rate_limiter import close_limiter, limiter, rate_limit_exceeded_handler

__all__ = [
    "close_limiter",
    "limiter",
    "rate_limit_exceeded_handler",
]
