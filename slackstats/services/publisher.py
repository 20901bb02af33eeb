"""
slackstats.services.publisher — Monthly Summary Publisher
==========================================================

Renders a :class:`Leaderboard` as Slack Block Kit JSON and posts it with
:class:`slack_sdk.WebClient`.  This is the only module that knows about
message markup; the statistics engine hands over plain value objects.
"""

from __future__ import annotations

import logging
from typing import Any

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from slackstats.constants import HOT_TAKE_EMOJI, LIKES_EMOJI
from slackstats.engine.counters import Counter, Leaderboard, MemberRecord
from slackstats.errors import UnavailableError

logger = logging.getLogger(__name__)


def _mentions(members: list[MemberRecord]) -> str:
    return ", ".join(f"<@{m.slack_uid}>" for m in members)


def _leader_line(label: str, members: list[MemberRecord], counter: Counter, noun: str) -> str:
    """``- most likes received: <@U1>, <@U2> with 5 likes``.

    Leaders with a zero count are not celebrated.
    """
    top = members[0].counters.get(counter) if members else 0
    if top == 0:
        return f"- {label}: nobody yet"
    return f"- {label}: {_mentions(members)} with {top} {noun}"


def _section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def build_leaderboard_blocks(leaderboard: Leaderboard) -> list[dict[str, Any]]:
    """Build the Block Kit payload for a monthly leaderboard."""
    return [
        _section(
            f"Slack member activity for the month of {leaderboard.period.month_name}"
        ),
        {"type": "divider"},
        _section(
            f"{LIKES_EMOJI} "
            + _leader_line(
                "most likes received",
                leaderboard.most_liked_members,
                Counter.RECEIVED_LIKES,
                "likes",
            )
        ),
        _section(
            f"{HOT_TAKE_EMOJI} "
            + _leader_line(
                "hottest takes (most dislikes received)",
                leaderboard.most_disliked_members,
                Counter.RECEIVED_DISLIKES,
                "dislikes",
            )
        ),
    ]


def fallback_text(leaderboard: Leaderboard) -> str:
    """Plain-text notification body for clients that don't render blocks."""
    return f"Slack member activity for {leaderboard.period.month_name}"


class SlackPublisher:
    """Posts leaderboards into Slack channels."""

    def __init__(self, client: WebClient) -> None:
        self.client = client

    @classmethod
    def from_token(cls, token: str) -> SlackPublisher:
        return cls(WebClient(token=token))

    def publish(self, channel_id: str, leaderboard: Leaderboard) -> str | None:
        """Post *leaderboard* to *channel_id* and return the message ``ts``.

        Raises
        ------
        UnavailableError
            If the Slack API rejects the request.
        """
        try:
            response = self.client.chat_postMessage(
                channel=channel_id,
                blocks=build_leaderboard_blocks(leaderboard),
                text=fallback_text(leaderboard),
            )
        except SlackApiError as exc:
            error = exc.response.get("error") if exc.response is not None else None
            logger.error("Slack rejected monthly update for %s: %s", channel_id, error)
            raise UnavailableError(f"failed to post summary: {error or exc}") from exc

        logger.info("Published monthly update for %s to %s", leaderboard.period, channel_id)
        return response.get("ts")
