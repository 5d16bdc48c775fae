"""initial schema

Revision ID: 5e1a9c3d7b20
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "5e1a9c3d7b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("username", sa.String(length=30), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "user_follows",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("follower_id", sa.String(length=128), nullable=False),
        sa.Column("followee_id", sa.String(length=128), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["followee_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("follower_id", "followee_id", name="uq_user_follow_pair"),
    )
    op.create_index("ix_user_follows_follower_id", "user_follows", ["follower_id"])
    op.create_index("ix_user_follows_followee_id", "user_follows", ["followee_id"])

    op.create_table(
        "things",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image", sa.String(length=2000), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("source", sa.String(length=32), nullable=False, server_default="manual"),
        sa.Column("source_id", sa.String(length=255), nullable=True),
        sa.Column("created_by", sa.String(length=128), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("source", "source_id", name="uq_thing_source_id"),
    )
    op.create_index("ix_things_title", "things", ["title"])
    op.create_index("ix_things_category", "things", ["category"])
    op.create_index("ix_things_created_by", "things", ["created_by"])

    op.create_table(
        "user_thing_interactions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("user_name", sa.String(length=100), nullable=False),
        sa.Column("thing_id", sa.String(length=36), nullable=False),
        sa.Column("state", sa.String(length=20), nullable=False),
        sa.Column("visibility", sa.String(length=20), nullable=False, server_default="friends"),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("liked_by", sa.JSON(), nullable=False),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["thing_id"], ["things.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_thing_interactions_user_id", "user_thing_interactions", ["user_id"])
    op.create_index("ix_user_thing_interactions_thing_id", "user_thing_interactions", ["thing_id"])
    op.create_index(
        "ix_user_thing_interactions_user_thing", "user_thing_interactions", ["user_id", "thing_id"]
    )
    op.create_index(
        "ix_user_thing_interactions_user_date",
        "user_thing_interactions",
        ["user_id", "date"],
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("thing_id", sa.String(length=36), nullable=False),
        sa.Column("interaction_id", sa.String(length=36), nullable=True),
        sa.Column("parent_comment_id", sa.String(length=36), nullable=True),
        sa.Column("author_id", sa.String(length=128), nullable=False),
        sa.Column("author_name", sa.String(length=100), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("liked_by", sa.JSON(), nullable=False),
        sa.Column("tagged_users", sa.JSON(), nullable=False),
        sa.Column("voice_note_url", sa.String(length=2000), nullable=True),
        sa.Column("voice_note_duration", sa.Float(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["thing_id"], ["things.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["interaction_id"], ["user_thing_interactions.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(["parent_comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_thing_id", "comments", ["thing_id"])
    op.create_index("ix_comments_interaction_id", "comments", ["interaction_id"])
    op.create_index("ix_comments_author_id", "comments", ["author_id"])

    op.create_table(
        "recommendations",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("from_user_id", sa.String(length=128), nullable=False),
        sa.Column("to_user_id", sa.String(length=128), nullable=False),
        sa.Column("thing_id", sa.String(length=36), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["from_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["to_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["thing_id"], ["things.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recommendations_from_user_id", "recommendations", ["from_user_id"])
    op.create_index("ix_recommendations_to_user_id", "recommendations", ["to_user_id"])
    op.create_index("ix_recommendations_thing_id", "recommendations", ["thing_id"])


def downgrade() -> None:
    op.drop_table("recommendations")
    op.drop_table("comments")
    op.drop_table("user_thing_interactions")
    op.drop_table("things")
    op.drop_table("user_follows")
    op.drop_table("users")
