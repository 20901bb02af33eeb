"""
slackstats.services.leaderboard_service — Monthly Leaderboard Aggregation
==========================================================================

Read-only queries over the member store.  A leaderboard is never persisted;
it is recomputed from ``members`` on every request, one
:meth:`MemberStore.max_by_counter` query per counter.

Ties are success: every member sharing the maximum is returned.  An empty
period is an empty result unless the caller asks for
``require_members=True``, in which case it is :class:`NotFoundError`.
"""

from __future__ import annotations

import logging

from slackstats.engine.counters import Counter, Leaderboard, MemberSummary
from slackstats.engine.period import MonthPeriod
from slackstats.errors import NotFoundError
from slackstats.services.member_store import MemberStore

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Computes :class:`Leaderboard` and :class:`MemberSummary` views."""

    def __init__(self, store: MemberStore) -> None:
        self.store = store

    def leaderboard(self, period: MonthPeriod, *, require_members: bool = False) -> Leaderboard:
        """Members with the most received likes and the most received dislikes."""
        board = Leaderboard(
            period=period,
            most_liked_members=self.store.max_by_counter(period, Counter.RECEIVED_LIKES),
            most_disliked_members=self.store.max_by_counter(period, Counter.RECEIVED_DISLIKES),
        )
        if board.is_empty and require_members:
            raise NotFoundError(f"no members recorded for {period}")
        logger.debug(
            "Leaderboard %s: %d liked / %d disliked leaders",
            period, len(board.most_liked_members), len(board.most_disliked_members),
        )
        return board

    def summary(self, period: MonthPeriod, *, require_members: bool = False) -> MemberSummary:
        """Leaders for every tracked counter."""
        result = MemberSummary(
            period=period,
            leaders={counter: self.store.max_by_counter(period, counter) for counter in Counter},
        )
        if result.is_empty and require_members:
            raise NotFoundError(f"no members recorded for {period}")
        return result
