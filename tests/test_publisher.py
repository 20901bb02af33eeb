"""
tests/test_publisher.py — Block Kit Rendering & Slack Posting
==============================================================
"""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from slackstats.engine.counters import CounterValues, Leaderboard, MemberRecord
from slackstats.engine.period import MonthPeriod
from slackstats.errors import UnavailableError
from slackstats.services.publisher import SlackPublisher, build_leaderboard_blocks

OCT = MonthPeriod.parse("10-2023")
NOW = datetime(2023, 10, 31, tzinfo=UTC)


def _member(id_: int, uid: str, **counters) -> MemberRecord:
    return MemberRecord(
        id=id_, slack_uid=uid, period=OCT,
        counters=CounterValues(**counters), created_at=NOW, updated_at=NOW,
    )


def _texts(blocks) -> list[str]:
    return [b["text"]["text"] for b in blocks if b["type"] == "section"]


class TestBuildBlocks:
    def test_layout(self):
        board = Leaderboard(
            period=OCT,
            most_liked_members=[_member(1, "U1", received_likes=5)],
            most_disliked_members=[_member(2, "U2", received_dislikes=3)],
        )
        blocks = build_leaderboard_blocks(board)

        assert [b["type"] for b in blocks] == ["section", "divider", "section", "section"]
        header, likes, dislikes = _texts(blocks)
        assert header == "Slack member activity for the month of October 2023"
        assert likes.endswith("most likes received: <@U1> with 5 likes")
        assert dislikes.endswith("hottest takes (most dislikes received): <@U2> with 3 dislikes")

    def test_ties_render_every_member(self):
        board = Leaderboard(
            period=OCT,
            most_liked_members=[
                _member(1, "A", received_likes=5),
                _member(2, "B", received_likes=5),
            ],
        )
        _, likes, _ = _texts(build_leaderboard_blocks(board))
        assert "<@A>, <@B> with 5 likes" in likes

    def test_zero_leaders_are_not_celebrated(self):
        board = Leaderboard(
            period=OCT,
            most_liked_members=[_member(1, "A")],
            most_disliked_members=[],
        )
        _, likes, dislikes = _texts(build_leaderboard_blocks(board))
        assert likes.endswith("nobody yet")
        assert dislikes.endswith("nobody yet")
        assert "<@A>" not in likes


class TestSlackPublisher:
    def test_posts_blocks_to_channel(self):
        client = MagicMock(spec=WebClient)
        client.chat_postMessage.return_value = {"ok": True, "ts": "1698700000.000100"}
        board = Leaderboard(period=OCT, most_liked_members=[_member(1, "U1", received_likes=1)])

        ts = SlackPublisher(client).publish("C123", board)

        assert ts == "1698700000.000100"
        kwargs = client.chat_postMessage.call_args.kwargs
        assert kwargs["channel"] == "C123"
        assert kwargs["blocks"] == build_leaderboard_blocks(board)
        assert "October 2023" in kwargs["text"]

    def test_slack_error_is_unavailable(self):
        client = MagicMock(spec=WebClient)
        client.chat_postMessage.side_effect = SlackApiError(
            "channel_not_found", {"ok": False, "error": "channel_not_found"}
        )
        with pytest.raises(UnavailableError, match="channel_not_found"):
            SlackPublisher(client).publish("C404", Leaderboard(period=OCT))
