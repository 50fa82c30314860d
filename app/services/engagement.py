"""
Engagement service: the deduplication gate for views and likes.

Every write runs as one transaction on the caller's session:

1. lock the article row (``ArticleNotFoundError`` if it is missing)
2. insert or delete the event row, letting the unique constraint decide
   whether the event is new
3. move the article counter only by rows actually inserted or deleted
4. commit

Any storage failure rolls the whole unit back and surfaces as
``StorageError``. Nothing is retried.
"""

from datetime import datetime
from logging import getLogger

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import file_logger
from app.configs.settings import MAX_IDENTITY_LENGTH, MAX_USER_AGENT_LENGTH
from app.errors.analytics import InvalidArgumentError
from app.errors.database import StorageError
from app.monitoring.prometheus import MetricsCollector
from app.monitoring.prometheus import metrics as default_metrics
from app.repositories.article import ArticleRepository, CounterName
from app.repositories.engagement import EngagementRepository
from app.schemas.analytics import LikeResult, LikeStatus, ViewResult
from app.utils.timezone import calendar_day, ensure_aware, utc_now

logger = file_logger(getLogger(__name__))


def validate_article_id(article_id: object) -> int:
    """
    Check that ``article_id`` is a positive integer.

    Raises:
        InvalidArgumentError: If it is not
    """
    if isinstance(article_id, bool) or not isinstance(article_id, int) or article_id <= 0:
        mssg = f"Article ID must be a positive integer, got {article_id!r}"
        raise InvalidArgumentError(mssg)
    return article_id


def validate_identity(identity: object) -> str:
    """
    Check that ``identity`` is a non-empty string of bounded length.

    Raises:
        InvalidArgumentError: If it is not
    """
    if not isinstance(identity, str) or not identity.strip():
        mssg = "Identity must be a non-empty string"
        raise InvalidArgumentError(mssg)
    if len(identity) > MAX_IDENTITY_LENGTH:
        mssg = f"Identity must be at most {MAX_IDENTITY_LENGTH} characters"
        raise InvalidArgumentError(mssg)
    return identity


def clip_user_agent(user_agent: str | None) -> str | None:
    """Truncate the user agent; empty values become None."""
    if not user_agent:
        return None
    return user_agent[:MAX_USER_AGENT_LENGTH]


class EngagementService:
    """
    Records views and toggles likes, keeping the article counters equal to
    the number of event rows.

    The service owns the transaction boundary of each call: it commits on
    success and rolls back on any failure, including ``ArticleNotFoundError``,
    so a rejected call leaves no partial write behind.
    """

    def __init__(
        self,
        session: AsyncSession,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            session: Async database session
            metrics: Metrics collector (defaults to the global instance)
        """
        self.session = session
        self.articles = ArticleRepository(session)
        self.events = EngagementRepository(session)
        self.metrics = metrics or default_metrics

    async def record_view(
        self,
        article_id: int,
        identity: str,
        user_agent: str | None = None,
        now: datetime | None = None,
    ) -> ViewResult:
        """
        Record a view, counting it at most once per identity per calendar day.

        Args:
            article_id: Viewed article
            identity: Deduplication identity (client IP)
            user_agent: Optional user agent, stored for information only
            now: Event time (defaults to the current time)

        Returns:
            ViewResult: ``counted`` is True only for the first view of the day

        Raises:
            InvalidArgumentError: If the article ID or identity is malformed
            ArticleNotFoundError: If the article does not exist
            StorageError: If the database operation fails
        """
        article_id = validate_article_id(article_id)
        identity = validate_identity(identity)
        occurred_at = ensure_aware(now) if now is not None else utc_now()

        try:
            await self.articles.lock_for_engagement(article_id)
            counted = await self.events.insert_view(
                article_id,
                identity,
                clip_user_agent(user_agent),
                occurred_at,
                calendar_day(occurred_at),
            )
            if counted:
                await self.articles.apply_delta(article_id, CounterName.VIEWS, 1)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.metrics.record_storage_error("record_view")
            logger.exception(f"Failed to record view for article {article_id}")
            raise StorageError(f"Failed to record view for article {article_id}") from e
        except Exception:
            await self.session.rollback()
            raise

        self.metrics.record_view(counted=counted)
        logger.debug(
            f"View on article {article_id} {'counted' if counted else 'already recorded today'}",
        )
        return ViewResult(counted=counted)

    async def toggle_like(
        self,
        article_id: int,
        identity: str,
        user_agent: str | None = None,
        now: datetime | None = None,
    ) -> LikeResult:
        """
        Flip the like state of ``identity`` on the article.

        An existing like is removed; otherwise a like is added. If a
        concurrent request from the same identity inserted the like first,
        the result is ``liked=True`` without a second counter increment.

        Returns:
            LikeResult: The like state after the toggle

        Raises:
            InvalidArgumentError: If the article ID or identity is malformed
            ArticleNotFoundError: If the article does not exist
            StorageError: If the database operation fails
        """
        article_id = validate_article_id(article_id)
        identity = validate_identity(identity)
        occurred_at = ensure_aware(now) if now is not None else utc_now()

        try:
            await self.articles.lock_for_engagement(article_id)
            if await self.events.delete_like(article_id, identity):
                await self.articles.apply_delta(article_id, CounterName.LIKES, -1)
                liked, outcome = False, "removed"
            else:
                inserted = await self.events.insert_like(
                    article_id,
                    identity,
                    clip_user_agent(user_agent),
                    occurred_at,
                    calendar_day(occurred_at),
                )
                if inserted:
                    await self.articles.apply_delta(article_id, CounterName.LIKES, 1)
                liked, outcome = True, "added" if inserted else "unchanged"
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.metrics.record_storage_error("toggle_like")
            logger.exception(f"Failed to toggle like for article {article_id}")
            raise StorageError(f"Failed to toggle like for article {article_id}") from e
        except Exception:
            await self.session.rollback()
            raise

        self.metrics.record_like(outcome)
        logger.debug(f"Like on article {article_id} {outcome}")
        return LikeResult(liked=liked)

    async def like_status(self, article_id: int, identity: str) -> LikeStatus:
        """
        Report whether ``identity`` currently likes the article.

        Raises:
            InvalidArgumentError: If the article ID or identity is malformed
            ArticleNotFoundError: If the article does not exist
            StorageError: If the database read fails
        """
        article_id = validate_article_id(article_id)
        identity = validate_identity(identity)

        try:
            await self.articles.get_or_raise(article_id)
            has_liked = await self.events.has_like(article_id, identity)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to read like status for article {article_id}")
            raise StorageError(f"Failed to read like status for article {article_id}") from e

        return LikeStatus(article_id=article_id, has_liked=has_liked)
