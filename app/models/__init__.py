"""Database models for the application."""

from app.models.article import ArticleDB
from app.models.engagement import ArticleLikeDB, ArticleViewDB

__all__ = ["ArticleDB", "ArticleLikeDB", "ArticleViewDB"]
