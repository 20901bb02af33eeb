"""Create members table

Revision ID: 5c2e81d0a7f4
Revises:
Create Date: 2026-10-18 09:12:40.118203

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5c2e81d0a7f4'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """One row per (slack_uid, MM-YYYY period) with reaction counters."""
    op.create_table(
        "members",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("slack_uid", sa.String(32), nullable=False),
        sa.Column("period", sa.String(7), nullable=False),
        sa.Column("received_likes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("received_dislikes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("given_likes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("given_dislikes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("slack_uid", "period", name="uq_members_slack_uid_period"),
    )
    op.create_index("ix_members_period", "members", ["period"])


def downgrade() -> None:
    """Drop members table."""
    op.drop_index("ix_members_period", table_name="members")
    op.drop_table("members")
