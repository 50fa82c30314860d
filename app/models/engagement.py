"""Engagement event models: the append/delete-only view and like logs."""

from datetime import UTC, date, datetime
from typing import cast

from sqlalchemy import Date, DateTime, Index, Integer, Text, UniqueConstraint
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from app.configs.settings import MAX_IDENTITY_LENGTH


class ArticleViewDB(SQLModel, table=True):
    """
    A counted view of an article.

    At most one row exists per (article, identity, calendar day); the unique
    constraint is what rejects a duplicate view, not application code.
    Rows are never updated and only disappear with their article.
    """

    __tablename__ = cast("declared_attr[str]", "article_views")

    __table_args__ = (
        UniqueConstraint(
            "article_id",
            "identity",
            "occurred_on",
            name="uq_article_views_article_identity_day",
        ),
        Index("ix_article_views_occurred_on_article", "occurred_on", "article_id"),
    )

    id: int | None = Field(default=None, primary_key=True)

    article_id: int = Field(
        sa_column=Column(
            "article_id",
            Integer,
            ForeignKey("articles.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Viewed article (foreign key to articles.id)",
    )
    identity: str = Field(
        sa_column=Column(String(MAX_IDENTITY_LENGTH), nullable=False, index=True),
        description="Deduplication identity (client IP address)",
    )
    user_agent: str | None = Field(
        default=None,
        sa_column=Column(Text),
        description="User agent, informational only",
    )
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Event timestamp",
    )
    occurred_on: date = Field(
        sa_column=Column(Date, nullable=False, index=True),
        description="Calendar day of occurred_at in the analytics timezone",
    )


class ArticleLikeDB(SQLModel, table=True):
    """
    A like of an article by one identity.

    Liking is a toggle: the row is inserted on like and deleted on unlike,
    so at most one row exists per (article, identity).
    """

    __tablename__ = cast("declared_attr[str]", "article_likes")

    __table_args__ = (
        UniqueConstraint("article_id", "identity", name="uq_article_likes_article_identity"),
    )

    id: int | None = Field(default=None, primary_key=True)

    article_id: int = Field(
        sa_column=Column(
            "article_id",
            Integer,
            ForeignKey("articles.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Liked article (foreign key to articles.id)",
    )
    identity: str = Field(
        sa_column=Column(String(MAX_IDENTITY_LENGTH), nullable=False, index=True),
        description="Deduplication identity (client IP address)",
    )
    user_agent: str | None = Field(
        default=None,
        sa_column=Column(Text),
        description="User agent, informational only",
    )
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Event timestamp",
    )
    occurred_on: date = Field(
        sa_column=Column(Date, nullable=False, index=True),
        description="Calendar day of occurred_at in the analytics timezone",
    )
