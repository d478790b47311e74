"""create accounts, profiles, posts, follows, conversations and notifications

Revision ID: 20250301_initial_schema
Revises:
Create Date: 2025-03-01
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20250301_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

UUID = postgresql.UUID(as_uuid=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", UUID, sa.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True, nullable=False),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("full_name", sa.String(length=150), nullable=False),
        sa.Column("bio", sa.Text()),
        sa.Column("interests", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=False),
        sa.Column("avatar_url", sa.String(length=1024)),
        *_timestamps(),
    )
    op.create_index("ix_profiles_username", "profiles", ["username"], unique=True)

    op.create_table(
        "revoked_tokens",
        sa.Column("jti", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("account_id", UUID, sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_revoked_tokens_account_id", "revoked_tokens", ["account_id"])

    op.create_table(
        "posts",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_posts_user_id", "posts", ["user_id"])

    op.create_table(
        "comments",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("post_id", UUID, sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])

    op.create_table(
        "likes",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("post_id", UUID, sa.ForeignKey("posts.id", ondelete="CASCADE")),
        sa.Column("comment_id", UUID, sa.ForeignKey("comments.id", ondelete="CASCADE")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        sa.UniqueConstraint("user_id", "comment_id", name="uq_likes_user_comment"),
        sa.CheckConstraint(
            "(post_id IS NOT NULL AND comment_id IS NULL) OR (post_id IS NULL AND comment_id IS NOT NULL)",
            name="ck_likes_single_target",
        ),
    )
    op.create_index("ix_likes_user_id", "likes", ["user_id"])
    op.create_index("ix_likes_post_id", "likes", ["post_id"])
    op.create_index("ix_likes_comment_id", "likes", ["comment_id"])

    op.create_table(
        "followers",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("follower_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("following_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_followers_pair"),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name="ck_followers_status"),
    )
    op.create_index("ix_followers_follower_id", "followers", ["follower_id"])
    op.create_index("ix_followers_following_id", "followers", ["following_id"])

    op.create_table(
        "conversations",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("participant1_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("participant2_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("last_message", sa.Text()),
        sa.Column("last_message_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("participant1_id", "participant2_id", name="uq_conversations_pair"),
        sa.CheckConstraint("participant1_id <> participant2_id", name="ck_conversations_distinct"),
    )
    op.create_index("ix_conversations_participant1_id", "conversations", ["participant1_id"])
    op.create_index("ix_conversations_participant2_id", "conversations", ["participant2_id"])

    op.create_table(
        "messages",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("conversation_id", UUID, sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sender_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])

    op.create_table(
        "notifications",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("recipient_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("actor_id", UUID, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("post_id", UUID, sa.ForeignKey("posts.id", ondelete="CASCADE")),
        sa.Column("comment_id", UUID, sa.ForeignKey("comments.id", ondelete="CASCADE")),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("type IN ('like', 'comment', 'follow', 'follow_request')", name="ck_notifications_type"),
        sa.CheckConstraint(
            "(type IN ('like', 'comment') AND post_id IS NOT NULL) OR "
            "(type IN ('follow', 'follow_request') AND post_id IS NULL AND comment_id IS NULL)",
            name="ck_notifications_target",
        ),
    )
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"])
    op.create_index("ix_notifications_actor_id", "notifications", ["actor_id"])
    op.create_index("ix_notifications_post_id", "notifications", ["post_id"])
    op.create_index("ix_notifications_comment_id", "notifications", ["comment_id"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("messages")
    op.drop_table("conversations")
    op.drop_table("followers")
    op.drop_table("likes")
    op.drop_table("comments")
    op.drop_table("posts")
    op.drop_table("revoked_tokens")
    op.drop_table("profiles")
    op.drop_table("accounts")
