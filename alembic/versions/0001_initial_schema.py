"""initial schema: users, auth providers, posts, tags, likes, comments

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("avatar", sa.String(length=512), nullable=True),
        sa.Column("bio", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("length(trim(email)) > 0", name="ck_users_email_not_empty"),
        sa.CheckConstraint(
            "length(trim(username)) > 0", name="ck_users_username_not_empty"
        ),
    )
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "user_auth_providers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("provider", sa.String(length=50), nullable=False),
        sa.Column("provider_account_id", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_user_auth_providers"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_user_auth_providers_user_id_users",
        ),
        sa.UniqueConstraint(
            "provider",
            "provider_account_id",
            name="uq_user_auth_providers_provider_account",
        ),
    )
    op.create_index(
        "ix_user_auth_providers_user_id", "user_auth_providers", ["user_id"]
    )
    op.create_index(
        "ix_user_auth_providers_created_at", "user_auth_providers", ["created_at"]
    )

    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_posts"),
        sa.ForeignKeyConstraint(
            ["author_id"], ["users.id"], name="fk_posts_author_id_users"
        ),
        sa.UniqueConstraint("slug", name="uq_posts_slug"),
        sa.CheckConstraint("length(trim(title)) > 0", name="ck_posts_title_not_empty"),
        sa.CheckConstraint("length(slug) > 0", name="ck_posts_slug_not_empty"),
    )
    op.create_index("ix_posts_author_id", "posts", ["author_id"])
    op.create_index("ix_posts_created_at", "posts", ["created_at"])

    op.create_table(
        "post_tags",
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("post_id", "name", name="pk_post_tags"),
        sa.ForeignKeyConstraint(
            ["post_id"], ["posts.id"], name="fk_post_tags_post_id_posts"
        ),
    )
    op.create_index("ix_post_tags_name", "post_tags", ["name"])

    op.create_table(
        "post_likes",
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("post_id", "user_id", name="pk_post_likes"),
        sa.ForeignKeyConstraint(
            ["post_id"], ["posts.id"], name="fk_post_likes_post_id_posts"
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_post_likes_user_id_users"
        ),
    )
    op.create_index("ix_post_likes_user_id", "post_likes", ["user_id"])

    # 评论不建物理外键，一致性由应用层维护
    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])
    op.create_index("ix_comments_created_at", "comments", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_comments_created_at", table_name="comments")
    op.drop_index("ix_comments_user_id", table_name="comments")
    op.drop_index("ix_comments_post_id", table_name="comments")
    op.drop_table("comments")

    op.drop_index("ix_post_likes_user_id", table_name="post_likes")
    op.drop_table("post_likes")

    op.drop_index("ix_post_tags_name", table_name="post_tags")
    op.drop_table("post_tags")

    op.drop_index("ix_posts_created_at", table_name="posts")
    op.drop_index("ix_posts_author_id", table_name="posts")
    op.drop_table("posts")

    op.drop_index("ix_user_auth_providers_created_at", table_name="user_auth_providers")
    op.drop_index("ix_user_auth_providers_user_id", table_name="user_auth_providers")
    op.drop_table("user_auth_providers")

    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_table("users")
