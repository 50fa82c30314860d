"""Engagement event store: the view and like logs and their aggregate queries."""

from datetime import date, datetime
from logging import getLogger
from typing import Any, TypeAlias

from sqlalchemy import Insert, delete, distinct, func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import file_logger
from app.errors.database import DatabaseConfigurationError
from app.models.engagement import ArticleLikeDB, ArticleViewDB

logger = file_logger(getLogger(__name__))

EventModel: TypeAlias = type[ArticleViewDB] | type[ArticleLikeDB]

_INSERT_CONSTRUCTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class EngagementRepository:
    """
    Repository for the append/delete-only engagement event tables.

    Inserts rely on the tables' unique constraints: a duplicate is skipped by
    the database (``ON CONFLICT DO NOTHING``) and reported to the caller as
    "not inserted" instead of raising.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    def _insert_ignoring_duplicates(self, model: EventModel) -> Insert:
        """
        Build an ``INSERT ... ON CONFLICT DO NOTHING RETURNING id`` for ``model``.

        Raises:
            DatabaseConfigurationError: If the dialect has no ON CONFLICT support
        """
        dialect = self.session.get_bind().dialect.name
        construct = _INSERT_CONSTRUCTS.get(dialect)
        if construct is None:
            mssg = f"Unsupported database dialect for engagement events: {dialect}"
            raise DatabaseConfigurationError(detail=mssg)
        # pyrefly: ignore [missing-attribute]
        return construct(model).on_conflict_do_nothing().returning(model.id)

    async def _insert_event(self, model: EventModel, values: dict[str, Any]) -> bool:
        result = await self.session.execute(self._insert_ignoring_duplicates(model).values(**values))
        return result.scalar_one_or_none() is not None

    async def insert_view(
        self,
        article_id: int,
        identity: str,
        user_agent: str | None,
        occurred_at: datetime,
        occurred_on: date,
    ) -> bool:
        """
        Record a view unless one exists for the same article, identity and day.

        Args:
            article_id: Article ID
            identity: Deduplication identity
            user_agent: Optional user agent
            occurred_at: Event timestamp
            occurred_on: Calendar day of the event

        Returns:
            bool: True if a row was inserted, False if the view was already recorded
        """
        return await self._insert_event(
            ArticleViewDB,
            {
                "article_id": article_id,
                "identity": identity,
                "user_agent": user_agent,
                "occurred_at": occurred_at,
                "occurred_on": occurred_on,
            },
        )

    async def insert_like(
        self,
        article_id: int,
        identity: str,
        user_agent: str | None,
        occurred_at: datetime,
        occurred_on: date,
    ) -> bool:
        """
        Record a like unless ``identity`` already likes the article.

        Returns:
            bool: True if a row was inserted, False if the like already existed
        """
        return await self._insert_event(
            ArticleLikeDB,
            {
                "article_id": article_id,
                "identity": identity,
                "user_agent": user_agent,
                "occurred_at": occurred_at,
                "occurred_on": occurred_on,
            },
        )

    async def delete_like(self, article_id: int, identity: str) -> bool:
        """
        Remove the like of ``identity`` on the article, if any.

        Returns:
            bool: True if a row was deleted
        """
        statement = (
            delete(ArticleLikeDB)
            .where(
                # pyrefly: ignore [bad-argument-type]
                ArticleLikeDB.article_id == article_id,
                ArticleLikeDB.identity == identity,
            )
            .returning(ArticleLikeDB.id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none() is not None

    async def has_like(self, article_id: int, identity: str) -> bool:
        """Check whether ``identity`` currently likes the article."""
        statement = (
            select(1)
            .where(
                # pyrefly: ignore [bad-argument-type]
                ArticleLikeDB.article_id == article_id,
                ArticleLikeDB.identity == identity,
            )
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none() is not None

    async def count_views(self, article_id: int) -> int:
        """Count view rows of one article."""
        statement = (
            select(func.count(ArticleViewDB.id))
            # pyrefly: ignore [bad-argument-type]
            .where(ArticleViewDB.article_id == article_id)
        )
        return int((await self.session.execute(statement)).scalar_one())

    async def count_likes(self, article_id: int) -> int:
        """Count like rows of one article."""
        statement = (
            select(func.count(ArticleLikeDB.id))
            # pyrefly: ignore [bad-argument-type]
            .where(ArticleLikeDB.article_id == article_id)
        )
        return int((await self.session.execute(statement)).scalar_one())

    async def daily_views(
        self,
        start_day: date | None,
        end_day: date,
        article_id: int | None = None,
    ) -> dict[date, int]:
        """
        Count view rows per calendar day.

        Each row is already unique per identity and day, so a day's count is
        the number of distinct identities that viewed on that day.

        Args:
            start_day: First day to include (None for no lower bound)
            end_day: Last day to include
            article_id: Restrict to one article

        Returns:
            dict[date, int]: Views per day; days without views are absent
        """
        return await self._daily_counts(ArticleViewDB, start_day, end_day, article_id)

    async def daily_likes(
        self,
        start_day: date | None,
        end_day: date,
        article_id: int | None = None,
    ) -> dict[date, int]:
        """Count current like rows per calendar day of the like."""
        return await self._daily_counts(ArticleLikeDB, start_day, end_day, article_id)

    async def _daily_counts(
        self,
        model: EventModel,
        start_day: date | None,
        end_day: date,
        article_id: int | None,
    ) -> dict[date, int]:
        statement = (
            select(model.occurred_on, func.count(model.id))
            # pyrefly: ignore [bad-argument-type]
            .where(model.occurred_on <= end_day)
            .group_by(model.occurred_on)
            .order_by(model.occurred_on)
        )
        if start_day is not None:
            # pyrefly: ignore [bad-argument-type]
            statement = statement.where(model.occurred_on >= start_day)
        if article_id is not None:
            # pyrefly: ignore [bad-argument-type]
            statement = statement.where(model.article_id == article_id)

        result = await self.session.execute(statement)
        return {day: int(count) for day, count in result.all()}

    async def first_view_day(self) -> date | None:
        """Return the earliest calendar day with a recorded view."""
        result = await self.session.execute(select(func.min(ArticleViewDB.occurred_on)))
        return result.scalar_one_or_none()

    async def view_window_summary(
        self,
        start: datetime | None,
        end: datetime,
    ) -> tuple[int, int, int]:
        """
        Summarize view rows with ``start <= occurred_at < end``.

        Returns:
            tuple[int, int, int]: (distinct articles, total views, distinct identities)
        """
        statement = select(
            func.count(distinct(ArticleViewDB.article_id)),
            func.count(ArticleViewDB.id),
            func.count(distinct(ArticleViewDB.identity)),
        # pyrefly: ignore [bad-argument-type]
        ).where(ArticleViewDB.occurred_at < end)
        if start is not None:
            # pyrefly: ignore [bad-argument-type]
            statement = statement.where(ArticleViewDB.occurred_at >= start)

        row = (await self.session.execute(statement)).one()
        return int(row[0]), int(row[1]), int(row[2])

    async def count_likes_between(self, start: datetime | None, end: datetime) -> int:
        """Count like rows with ``start <= occurred_at < end``."""
        # pyrefly: ignore [bad-argument-type]
        statement = select(func.count(ArticleLikeDB.id)).where(ArticleLikeDB.occurred_at < end)
        if start is not None:
            # pyrefly: ignore [bad-argument-type]
            statement = statement.where(ArticleLikeDB.occurred_at >= start)
        return int((await self.session.execute(statement)).scalar_one())
