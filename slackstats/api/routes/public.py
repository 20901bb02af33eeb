"""
slackstats.api.routes.public — Read-only JSON endpoints
========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from slackstats.api.deps import get_leaderboard_service, get_store
from slackstats.engine.period import MonthPeriod
from slackstats.errors import InvalidError, UnavailableError
from slackstats.services.leaderboard_service import LeaderboardService
from slackstats.services.member_store import MemberStore

router = APIRouter(tags=["public"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _period_or_400(raw: str) -> MonthPeriod:
    try:
        return MonthPeriod.parse(raw)
    except InvalidError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc))


# ---------------------------------------------------------------------------
# GET /leaderboard/{period}
# ---------------------------------------------------------------------------
@router.get("/leaderboard/{period}")
def get_leaderboard(
    period: str,
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """Most-liked and most-disliked members for ``MM-YYYY``.  Empty lists if none."""
    try:
        return service.leaderboard(_period_or_400(period)).to_dict()
    except UnavailableError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))


# ---------------------------------------------------------------------------
# GET /summary/{period}
# ---------------------------------------------------------------------------
@router.get("/summary/{period}")
def get_summary(
    period: str,
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """Leaders for every tracked counter (received and given)."""
    try:
        return service.summary(_period_or_400(period)).to_dict()
    except UnavailableError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))


# ---------------------------------------------------------------------------
# GET /members/{period}
# ---------------------------------------------------------------------------
@router.get("/members/{period}")
def list_members(
    period: str,
    store: MemberStore = Depends(get_store),
):
    month = _period_or_400(period)
    try:
        members = store.list_period(month)
    except UnavailableError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))
    return {
        "period": str(month),
        "total": len(members),
        "members": [m.to_dict() for m in members],
    }
