"""Repository layer for database operations."""

from app.repositories.article import ArticleRepository, CounterName
from app.repositories.engagement import EngagementRepository

__all__ = ["ArticleRepository", "CounterName", "EngagementRepository"]
