"""
Database initialization and seeding script.

Creates the analytics tables and optionally seeds demo articles so the
dashboard has something to show in development.

Usage:
    uv run python -m app.db.init_db
    uv run python -m app.db.init_db --seed 12

Note:
    In production the schema is managed by Alembic migrations.
    Run 'uv run alembic upgrade head' to apply migrations.
"""

from argparse import ArgumentParser, Namespace
from asyncio import run as asyncio_run
from datetime import timedelta
from logging import getLogger

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.configs import file_logger
from app.db.database import close_db, init_db, transaction
from app.errors.database import DatabaseInitializationError
from app.models import ArticleDB
from app.repositories import ArticleRepository
from app.utils.timezone import utc_now

logger = file_logger(getLogger(__name__))


def parse_args(argv: list[str] | None = None) -> Namespace:
    parser = ArgumentParser(description="Create analytics tables and seed demo data.")
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        metavar="N",
        help="Number of published demo articles to create (skipped if articles exist)",
    )
    return parser.parse_args(argv)


async def seed_articles(count: int) -> int:
    """
    Create ``count`` published demo articles with zeroed counters.

    Does nothing when the articles table is not empty.

    Returns:
        int: Number of articles created
    """
    async with transaction() as session:
        existing = (await session.execute(select(func.count(ArticleDB.id)))).scalar_one()
        if existing:
            logger.info(f"Skipping seed: {existing} articles already exist")
            return 0

        repo = ArticleRepository(session)
        now = utc_now()
        for index in range(1, count + 1):
            await repo.create(
                title=f"Demo article {index}",
                slug=f"demo-article-{index}",
                status="published",
                published_at=now - timedelta(days=index),
                summary="Seeded for local development",
            )
    return count


async def main(argv: list[str] | None = None) -> None:
    """Create analytics tables, verify the connection and optionally seed."""
    args = parse_args(argv)
    try:
        logger.info("Verifying database connection...")
        await init_db()
        if args.seed > 0:
            created = await seed_articles(args.seed)
            logger.info(f"Seeded {created} articles")
        logger.info("Database ready!")
    except (SQLAlchemyError, OSError) as e:
        logger.exception("Failed to initialize database")
        raise DatabaseInitializationError from e
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio_run(main())
