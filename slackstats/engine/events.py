"""
slackstats.engine.events — ReactionEvent and the Slack Normalizer
==================================================================

Every Slack reaction webhook is normalized into one or two
:class:`ReactionEvent` envelopes before the reconciliation engine sees it:

* a ``RECEIVED`` event for the author of the reacted-to item
  (``event.item_user``), and
* a ``GIVEN`` event for the reacting user (``event.user``).

Only thumbs-up / thumbs-down reactions (any skin tone) are tracked; every
other reaction normalizes to nothing.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from slackstats.constants import (
    NEGATIVE_REACTIONS,
    POSITIVE_REACTIONS,
    REACTION_ADDED,
    REACTION_REMOVED,
    SKIN_TONE_SEPARATOR,
    SYSTEM_UIDS,
)

__all__ = [
    "ReactionDirection",
    "ReactionEvent",
    "ReactionPolarity",
    "ReactionRole",
    "is_trackable_uid",
    "normalize_slack_event",
    "polarity_of",
]


class ReactionPolarity(enum.StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class ReactionDirection(enum.StrEnum):
    ADDED = "added"
    REMOVED = "removed"


class ReactionRole(enum.StrEnum):
    """Which side of the reaction the target member was on."""
    RECEIVED = "received"
    GIVEN = "given"


_DIRECTION_FOR_TYPE: dict[str, ReactionDirection] = {
    REACTION_ADDED: ReactionDirection.ADDED,
    REACTION_REMOVED: ReactionDirection.REMOVED,
}


@dataclass(frozen=True, slots=True)
class ReactionEvent:
    """Normalized reaction event — the sole input to reconciliation."""

    target_uid: str
    polarity: ReactionPolarity
    direction: ReactionDirection
    role: ReactionRole = ReactionRole.RECEIVED


def is_trackable_uid(uid: str | None, ignored: Iterable[str] = ()) -> bool:
    """False for empty ids, Slackbot, and any configured ignored id."""
    if not uid:
        return False
    return uid not in SYSTEM_UIDS and uid not in set(ignored)


def polarity_of(reaction: str) -> ReactionPolarity | None:
    """Map a Slack reaction name to a polarity, ignoring skin tones."""
    base = reaction.split(SKIN_TONE_SEPARATOR, 1)[0]
    if base in POSITIVE_REACTIONS:
        return ReactionPolarity.POSITIVE
    if base in NEGATIVE_REACTIONS:
        return ReactionPolarity.NEGATIVE
    return None


def normalize_slack_event(event: dict[str, Any]) -> list[ReactionEvent]:
    """Turn a Slack ``reaction_added``/``reaction_removed`` inner event into
    :class:`ReactionEvent` envelopes.

    Identity filtering is left to the reconciliation engine so that dropped
    targets are logged in one place.  Unknown event types and untracked
    reactions return an empty list.
    """
    direction = _DIRECTION_FOR_TYPE.get(event.get("type", ""))
    if direction is None:
        return []

    polarity = polarity_of(event.get("reaction") or "")
    if polarity is None:
        return []

    return [
        ReactionEvent(
            target_uid=event.get("item_user") or "",
            polarity=polarity,
            direction=direction,
            role=ReactionRole.RECEIVED,
        ),
        ReactionEvent(
            target_uid=event.get("user") or "",
            polarity=polarity,
            direction=direction,
            role=ReactionRole.GIVEN,
        ),
    ]
