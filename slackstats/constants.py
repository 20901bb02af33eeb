"""
slackstats.constants — Shared Constants
========================================

Single source of truth for Slack reaction names and sentinel identities.
Import from here instead of duplicating in the normalizer, routes, and tests.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Reaction names (as delivered in ``event.reaction``)
# ---------------------------------------------------------------------------
THUMBS_UP = "+1"
THUMBS_DOWN = "-1"

POSITIVE_REACTIONS: frozenset[str] = frozenset({THUMBS_UP, "thumbsup"})
NEGATIVE_REACTIONS: frozenset[str] = frozenset({THUMBS_DOWN, "thumbsdown"})

# Slack appends skin tones as ``+1::skin-tone-3``
SKIN_TONE_SEPARATOR = "::"

# ---------------------------------------------------------------------------
# Identities that never collect stats
# ---------------------------------------------------------------------------
SLACKBOT_UID = "USLACKBOT"
SYSTEM_UIDS: frozenset[str] = frozenset({SLACKBOT_UID})

# ---------------------------------------------------------------------------
# Slack Events API envelope / inner event types
# ---------------------------------------------------------------------------
URL_VERIFICATION = "url_verification"
EVENT_CALLBACK = "event_callback"
REACTION_ADDED = "reaction_added"
REACTION_REMOVED = "reaction_removed"

# ---------------------------------------------------------------------------
# Summary presentation (used by the publisher)
# ---------------------------------------------------------------------------
LIKES_EMOJI = "\U0001f44d"      # 👍
HOT_TAKE_EMOJI = "\U0001f525"   # 🔥
