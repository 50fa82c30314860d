"""Article repository: reads for analytics and the denormalized counter writes."""

from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import Literal, TypeAlias

from sqlalchemy import asc, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import file_logger
from app.errors.analytics import ArticleNotFoundError, InvalidArgumentError
from app.models.article import ArticleDB

logger = file_logger(getLogger(__name__))

ArticleStatus: TypeAlias = Literal["draft", "published", "archived"]


class CounterName(StrEnum):
    """Denormalized engagement counters stored on the article row."""

    VIEWS = "views"
    LIKES = "likes"

    @property
    def column(self) -> str:
        """Return the article column backing this counter."""
        return _COUNTER_COLUMNS[self]


_COUNTER_COLUMNS: dict[CounterName, str] = {
    CounterName.VIEWS: "view_count",
    CounterName.LIKES: "like_count",
}

ALLOWED_DELTAS = frozenset({1, -1})


def ranking_order() -> tuple:
    """Order by views desc, likes desc, then id asc so equal rows rank stably."""
    # pyrefly: ignore [bad-argument-type]
    return desc(ArticleDB.view_count), desc(ArticleDB.like_count), asc(ArticleDB.id)


class ArticleRepository:
    """
    Repository for the article fields engagement analytics depends on.

    Article CRUD belongs to the content service; this repository only reads
    articles, locks them for engagement writes and maintains their counters.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    async def create(
        self,
        title: str,
        slug: str,
        status: ArticleStatus = "draft",
        published_at: datetime | None = None,
        summary: str | None = None,
    ) -> ArticleDB:
        """
        Insert an article with zeroed counters.

        Used for seeding; regular article creation is handled by the content service.

        Returns:
            ArticleDB: Created article
        """
        db_article = ArticleDB(
            title=title,
            slug=slug,
            summary=summary,
            status=status,
            published_at=published_at,
            view_count=0,
            like_count=0,
            created_at=datetime.now(tz=UTC),
        )
        self.session.add(db_article)
        await self.session.flush()
        await self.session.refresh(db_article)
        return db_article

    async def get_by_id(self, article_id: int) -> ArticleDB | None:
        """
        Get article by ID.

        Args:
            article_id: Article ID

        Returns:
            ArticleDB | None: Article if found, None otherwise
        """
        result = await self.session.execute(
            # pyrefly: ignore [bad-argument-type]
            select(ArticleDB).where(ArticleDB.id == article_id),
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, article_id: int) -> ArticleDB:
        """
        Get article by ID or raise if it does not exist.

        Raises:
            ArticleNotFoundError: If the article is absent
        """
        article = await self.get_by_id(article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        return article

    async def lock_for_engagement(self, article_id: int) -> None:
        """
        Lock the article row for the rest of the current transaction.

        Serializes concurrent engagement writes on the same article
        (``SELECT ... FOR UPDATE``; SQLite ignores the clause and serializes
        writers on its own).

        Raises:
            ArticleNotFoundError: If the article is absent
        """
        result = await self.session.execute(
            # pyrefly: ignore [bad-argument-type]
            select(ArticleDB.id).where(ArticleDB.id == article_id).with_for_update(),
        )
        if result.scalar_one_or_none() is None:
            raise ArticleNotFoundError(article_id)

    async def apply_delta(self, article_id: int, counter: CounterName, delta: int) -> None:
        """
        Apply ``delta`` to one counter with a single atomic ``UPDATE``.

        Must run in the same transaction as the event insert or delete it
        accounts for.

        Args:
            article_id: Article ID
            counter: Counter to change
            delta: +1 or -1

        Raises:
            InvalidArgumentError: If delta is not +1 or -1
            ArticleNotFoundError: If no article row was updated
        """
        if delta not in ALLOWED_DELTAS:
            mssg = f"Counter delta must be +1 or -1, got {delta}"
            raise InvalidArgumentError(mssg)

        column = getattr(ArticleDB, counter.column)
        statement = (
            update(ArticleDB)
            # pyrefly: ignore [bad-argument-type]
            .where(ArticleDB.id == article_id)
            .values({counter.column: column + delta, "updated_at": datetime.now(tz=UTC)})
        )
        result = await self.session.execute(statement)
        if result.rowcount == 0:
            raise ArticleNotFoundError(article_id)
        logger.debug(f"Applied {delta:+d} to {counter.column} of article {article_id}")

    async def totals(self) -> tuple[int, int, int]:
        """
        Count articles and sum their counters.

        Returns:
            tuple[int, int, int]: (articles, views, likes)
        """
        statement = select(
            func.count(ArticleDB.id),
            func.coalesce(func.sum(ArticleDB.view_count), 0),
            func.coalesce(func.sum(ArticleDB.like_count), 0),
        )
        row = (await self.session.execute(statement)).one()
        return int(row[0]), int(row[1]), int(row[2])

    async def get_recent_published(self, limit: int) -> list[ArticleDB]:
        """
        Get the most recently published articles.

        Args:
            limit: Maximum number of records to return

        Returns:
            list[ArticleDB]: Articles ordered by published_at descending
        """
        query = (
            select(ArticleDB)
            # pyrefly: ignore [bad-argument-type]
            .where(ArticleDB.status == "published", ArticleDB.published_at.is_not(None))
            # pyrefly: ignore [bad-argument-type]
            .order_by(desc(ArticleDB.published_at), asc(ArticleDB.id))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_top_ranked(
        self,
        limit: int,
        published_since: datetime | None = None,
    ) -> list[ArticleDB]:
        """
        Get published articles ranked by their all-time counters.

        Args:
            limit: Maximum number of records to return
            published_since: Only consider articles published at or after this instant

        Returns:
            list[ArticleDB]: Articles in ranking order
        """
        # pyrefly: ignore [bad-argument-type]
        query = select(ArticleDB).where(ArticleDB.status == "published")
        if published_since is not None:
            # pyrefly: ignore [bad-argument-type]
            query = query.where(ArticleDB.published_at >= published_since)

        query = query.order_by(*ranking_order()).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
