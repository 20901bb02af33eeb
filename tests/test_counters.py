"""
tests/test_counters.py — Pure Counter Logic & Slack Normalization
==================================================================
Covers apply_reaction (increment, clamping, add/remove convergence) and the
Slack reaction payload normalizer.  No database involved.
"""

from __future__ import annotations

import pytest

from slackstats.engine.counters import Counter, CounterValues, apply_reaction
from slackstats.engine.events import (
    ReactionDirection,
    ReactionEvent,
    ReactionPolarity,
    ReactionRole,
    is_trackable_uid,
    normalize_slack_event,
    polarity_of,
)
from slackstats.errors import InvalidError

ADDED = ReactionDirection.ADDED
REMOVED = ReactionDirection.REMOVED
POS = ReactionPolarity.POSITIVE
NEG = ReactionPolarity.NEGATIVE


def _event(polarity=POS, direction=ADDED, role=ReactionRole.RECEIVED) -> ReactionEvent:
    return ReactionEvent(target_uid="U1", polarity=polarity, direction=direction, role=role)


class TestApplyReaction:
    @pytest.mark.parametrize("polarity, role, counter", [
        (POS, ReactionRole.RECEIVED, Counter.RECEIVED_LIKES),
        (NEG, ReactionRole.RECEIVED, Counter.RECEIVED_DISLIKES),
        (POS, ReactionRole.GIVEN, Counter.GIVEN_LIKES),
        (NEG, ReactionRole.GIVEN, Counter.GIVEN_DISLIKES),
    ])
    def test_add_increments_only_matching_counter(self, polarity, role, counter):
        after = apply_reaction(CounterValues(), _event(polarity, ADDED, role))
        assert after.get(counter) == 1
        assert sum(after.as_dict().values()) == 1

    def test_adds_count_matching_polarity(self):
        counters = CounterValues()
        for polarity in (POS, POS, NEG, POS, NEG):
            counters = apply_reaction(counters, _event(polarity))
        assert counters.received_likes == 3
        assert counters.received_dislikes == 2

    def test_add_then_remove_restores_prior_value(self):
        before = CounterValues(received_likes=4, received_dislikes=2)
        after = apply_reaction(apply_reaction(before, _event(NEG, ADDED)), _event(NEG, REMOVED))
        assert after == before

    def test_remove_from_zero_clamps(self):
        counters = CounterValues()
        for _ in range(3):
            counters = apply_reaction(counters, _event(POS, REMOVED))
        assert counters.received_likes == 0

    def test_input_is_not_mutated(self):
        before = CounterValues(received_likes=1)
        apply_reaction(before, _event(POS, ADDED))
        assert before.received_likes == 1


class TestCounterValues:
    def test_negative_rejected(self):
        with pytest.raises(InvalidError):
            CounterValues(received_likes=-1)

    def test_unknown_counter_rejected(self):
        with pytest.raises(InvalidError):
            CounterValues().get("received_hugs")  # type: ignore[arg-type]

    def test_counter_parse_accepts_column_name(self):
        assert Counter.parse("given_likes") is Counter.GIVEN_LIKES


class TestPolarity:
    @pytest.mark.parametrize("reaction, expected", [
        ("+1", POS),
        ("thumbsup", POS),
        ("+1::skin-tone-4", POS),
        ("-1", NEG),
        ("thumbsdown::skin-tone-2", NEG),
        ("tada", None),
        ("", None),
    ])
    def test_polarity_of(self, reaction, expected):
        assert polarity_of(reaction) == expected


class TestNormalizeSlackEvent:
    def test_reaction_added_yields_received_and_given(self):
        events = normalize_slack_event({
            "type": "reaction_added",
            "user": "U_REACTOR",
            "reaction": "+1",
            "item_user": "U_AUTHOR",
            "item": {"type": "message", "channel": "C1", "ts": "1.2"},
        })
        assert events == [
            ReactionEvent("U_AUTHOR", POS, ADDED, ReactionRole.RECEIVED),
            ReactionEvent("U_REACTOR", POS, ADDED, ReactionRole.GIVEN),
        ]

    def test_reaction_removed_direction(self):
        events = normalize_slack_event({
            "type": "reaction_removed",
            "user": "U2",
            "reaction": "-1",
            "item_user": "U1",
        })
        assert {e.direction for e in events} == {REMOVED}
        assert {e.polarity for e in events} == {NEG}

    def test_untracked_reaction_yields_nothing(self):
        assert normalize_slack_event({
            "type": "reaction_added", "user": "U2", "reaction": "eyes", "item_user": "U1",
        }) == []

    def test_other_event_type_yields_nothing(self):
        assert normalize_slack_event({"type": "message", "text": "+1"}) == []

    def test_missing_item_user_becomes_empty_target(self):
        events = normalize_slack_event({"type": "reaction_added", "user": "U2", "reaction": "+1"})
        assert events[0].target_uid == ""


class TestTrackableUid:
    def test_filters(self):
        assert is_trackable_uid("U1")
        assert not is_trackable_uid("")
        assert not is_trackable_uid(None)
        assert not is_trackable_uid("USLACKBOT")
        assert not is_trackable_uid("B123", ignored={"B123"})
