"""Article database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast

from pydantic import ConfigDict
from sqlalchemy import CheckConstraint, DateTime, Index, Integer, text
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class ArticleDB(SQLModel, table=True):
    """
    Article database model.

    Only the subset of the article entity that engagement analytics reads or
    writes lives here. ``view_count`` and ``like_count`` are denormalized
    counters kept equal to the number of rows in ``article_views`` and
    ``article_likes``; nothing but the engagement service writes them.
    """

    __tablename__ = cast("declared_attr[str]", "articles")

    __table_args__ = (
        CheckConstraint("view_count >= 0", name="ck_articles_view_count_non_negative"),
        CheckConstraint("like_count >= 0", name="ck_articles_like_count_non_negative"),
        Index("ix_articles_status_published", "status", "published_at"),
        Index("ix_articles_ranking", "view_count", "like_count"),
    )

    # Primary key
    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Article ID",
    )

    title: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Article title",
    )
    slug: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    summary: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Article excerpt",
    )
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, index=True, server_default="draft"),
        description="Article status (draft, published, archived)",
    )

    # Denormalized engagement counters
    view_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default=text("0")),
        description="Number of recorded view events",
    )
    like_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default=text("0")),
        description="Number of recorded like events",
    )

    # Timestamps (timezone-aware)
    published_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), index=True),
        description="Publication timestamp",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 42,
                "title": "Understanding Async SQLAlchemy",
                "slug": "understanding-async-sqlalchemy",
                "summary": "Sessions, transactions and the event loop",
                "status": "published",
                "view_count": 120,
                "like_count": 8,
                "published_at": "2026-01-05T09:00:00+00:00",
            },
        },
    )
