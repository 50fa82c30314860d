"""
Analytics schema: articles and engagement event tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

This migration creates the schema for engagement analytics:
- articles: the article fields analytics reads, with denormalized counters
- article_views: one row per (article, identity, calendar day)
- article_likes: one row per (article, identity) while the like stands
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# Revision identifiers, used by Alembic
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _event_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("article_id", sa.Integer(), nullable=False),
        sa.Column("identity", sa.String(length=64), nullable=False),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("occurred_on", sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(["article_id"], ["articles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    ]


def upgrade() -> None:
    """Apply schema changes for this revision."""
    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("summary", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="draft", nullable=False),
        sa.Column("view_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("like_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("view_count >= 0", name="ck_articles_view_count_non_negative"),
        sa.CheckConstraint("like_count >= 0", name="ck_articles_like_count_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_articles_slug", "articles", ["slug"], unique=True)
    op.create_index("ix_articles_status", "articles", ["status"], unique=False)
    op.create_index("ix_articles_published_at", "articles", ["published_at"], unique=False)
    op.create_index(
        "ix_articles_status_published",
        "articles",
        ["status", "published_at"],
        unique=False,
    )
    op.create_index("ix_articles_ranking", "articles", ["view_count", "like_count"], unique=False)

    op.create_table(
        "article_views",
        *_event_columns(),
        sa.UniqueConstraint(
            "article_id",
            "identity",
            "occurred_on",
            name="uq_article_views_article_identity_day",
        ),
    )
    op.create_table(
        "article_likes",
        *_event_columns(),
        sa.UniqueConstraint("article_id", "identity", name="uq_article_likes_article_identity"),
    )

    for table in ("article_views", "article_likes"):
        for column in ("article_id", "identity", "occurred_at", "occurred_on"):
            op.create_index(f"ix_{table}_{column}", table, [column], unique=False)
    op.create_index(
        "ix_article_views_occurred_on_article",
        "article_views",
        ["occurred_on", "article_id"],
        unique=False,
    )


def downgrade() -> None:
    """Revert schema changes for this revision."""
    op.drop_index("ix_article_views_occurred_on_article", table_name="article_views")
    for table in ("article_likes", "article_views"):
        for column in ("occurred_on", "occurred_at", "identity", "article_id"):
            op.drop_index(f"ix_{table}_{column}", table_name=table)
        op.drop_table(table)

    for index in (
        "ix_articles_ranking",
        "ix_articles_status_published",
        "ix_articles_published_at",
        "ix_articles_status",
        "ix_articles_slug",
    ):
        op.drop_index(index, table_name="articles")
    op.drop_table("articles")
