"""
slackstats.database.models — SQLAlchemy 2.0 Data Models
========================================================

Tables:
- members — one row per (Slack user, month) with like/dislike counters
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all SlackStats ORM models."""


# ---------------------------------------------------------------------------
# Members: one row per Slack user per MM-YYYY period
# ---------------------------------------------------------------------------
class Member(Base):
    """Monthly reaction counters for one Slack workspace member.

    ``period`` holds the canonical ``MM-YYYY`` string.  Timestamps are set by
    :class:`~slackstats.services.member_store.MemberStore` from its clock,
    not by server defaults, so tests can pin them.
    """
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slack_uid: Mapped[str] = mapped_column(String(32), nullable=False)
    period: Mapped[str] = mapped_column(String(7), nullable=False)
    received_likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    received_dislikes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    given_likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    given_dislikes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("slack_uid", "period", name="uq_members_slack_uid_period"),
        Index("ix_members_period", "period"),
    )

    def __repr__(self) -> str:
        return (
            f"<Member id={self.id} uid={self.slack_uid!r} period={self.period} "
            f"likes={self.received_likes} dislikes={self.received_dislikes}>"
        )
