"""add tags table

Revision ID: 8c4d2e6f1a37
Revises: 5e1a9c3d7b20
Create Date: 2026-10-17 10:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8c4d2e6f1a37"
down_revision: Union[str, Sequence[str], None] = "5e1a9c3d7b20"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tags",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("interaction_id", sa.String(length=36), nullable=False),
        sa.Column("thing_id", sa.String(length=36), nullable=False),
        sa.Column("thing_title", sa.String(length=500), nullable=False),
        sa.Column("tagger_id", sa.String(length=128), nullable=False),
        sa.Column("tagger_name", sa.String(length=100), nullable=False),
        sa.Column("tagged_user_id", sa.String(length=128), nullable=True),
        sa.Column("tagged_name", sa.String(length=100), nullable=False),
        sa.Column("tagged_email", sa.String(length=255), nullable=True),
        sa.Column("state", sa.String(length=20), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(
            ["interaction_id"], ["user_thing_interactions.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["thing_id"], ["things.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tagger_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tagged_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tags_interaction_id", "tags", ["interaction_id"])
    op.create_index("ix_tags_tagged_user_id", "tags", ["tagged_user_id"])


def downgrade() -> None:
    op.drop_index("ix_tags_tagged_user_id", table_name="tags")
    op.drop_index("ix_tags_interaction_id", table_name="tags")
    op.drop_table("tags")
