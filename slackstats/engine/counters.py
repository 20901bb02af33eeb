"""
slackstats.engine.counters — Counter Tuple, Pure Deltas, and Snapshots
=======================================================================

The reconciliation engine never mutates a row in place.  It reads an
immutable :class:`MemberRecord`, computes the next :class:`CounterValues`
with :func:`apply_reaction`, and hands the whole tuple back to the store.

Delta rules::

    added   + positive  → likes    += 1
    added   + negative  → dislikes += 1
    removed + positive  → likes    = max(likes - 1, 0)
    removed + negative  → dislikes = max(dislikes - 1, 0)

``role`` picks which pair moves: ``received_*`` for the author of the
reacted-to item, ``given_*`` for the reacting user.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import datetime

from slackstats.engine.events import ReactionDirection, ReactionEvent, ReactionPolarity, ReactionRole
from slackstats.engine.period import MonthPeriod
from slackstats.errors import InvalidError

__all__ = [
    "Counter",
    "CounterValues",
    "Leaderboard",
    "MemberRecord",
    "MemberSummary",
    "apply_reaction",
]


class Counter(enum.StrEnum):
    """Tracked counters.  Values match the ``members`` column names."""
    RECEIVED_LIKES = "received_likes"
    RECEIVED_DISLIKES = "received_dislikes"
    GIVEN_LIKES = "given_likes"
    GIVEN_DISLIKES = "given_dislikes"

    @classmethod
    def parse(cls, name: str | Counter) -> Counter:
        try:
            return cls(name)
        except ValueError:
            raise InvalidError(f"unknown counter {name!r}") from None


_COUNTER_FOR: dict[tuple[ReactionRole, ReactionPolarity], Counter] = {
    (ReactionRole.RECEIVED, ReactionPolarity.POSITIVE): Counter.RECEIVED_LIKES,
    (ReactionRole.RECEIVED, ReactionPolarity.NEGATIVE): Counter.RECEIVED_DISLIKES,
    (ReactionRole.GIVEN, ReactionPolarity.POSITIVE): Counter.GIVEN_LIKES,
    (ReactionRole.GIVEN, ReactionPolarity.NEGATIVE): Counter.GIVEN_DISLIKES,
}


@dataclass(frozen=True, slots=True)
class CounterValues:
    """Absolute counter values for one member-month.  Never negative."""

    received_likes: int = 0
    received_dislikes: int = 0
    given_likes: int = 0
    given_dislikes: int = 0

    def __post_init__(self) -> None:
        for counter in Counter:
            value = getattr(self, counter.value)
            if value < 0:
                raise InvalidError(f"{counter.value} must be non-negative, got {value}")

    def get(self, counter: Counter) -> int:
        return getattr(self, Counter.parse(counter).value)

    def with_value(self, counter: Counter, value: int) -> CounterValues:
        return replace(self, **{Counter.parse(counter).value: value})

    def as_dict(self) -> dict[str, int]:
        return {counter.value: getattr(self, counter.value) for counter in Counter}


def counter_for(event: ReactionEvent) -> Counter:
    """Which counter *event* moves."""
    return _COUNTER_FOR[(event.role, event.polarity)]


def apply_reaction(counters: CounterValues, event: ReactionEvent) -> CounterValues:
    """Return the counters after *event*.  Pure; decrements clamp at zero."""
    counter = counter_for(event)
    current = counters.get(counter)
    if event.direction is ReactionDirection.ADDED:
        return counters.with_value(counter, current + 1)
    return counters.with_value(counter, max(current - 1, 0))


# ---------------------------------------------------------------------------
# Snapshots & derived views
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class MemberRecord:
    """Read-only snapshot of one ``members`` row."""

    id: int
    slack_uid: str
    period: MonthPeriod
    counters: CounterValues
    created_at: datetime
    updated_at: datetime

    @property
    def received_likes(self) -> int:
        return self.counters.received_likes

    @property
    def received_dislikes(self) -> int:
        return self.counters.received_dislikes

    @property
    def given_likes(self) -> int:
        return self.counters.given_likes

    @property
    def given_dislikes(self) -> int:
        return self.counters.given_dislikes

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "slack_uid": self.slack_uid,
            "period": str(self.period),
            **self.counters.as_dict(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class Leaderboard:
    """Members leading the received-likes and received-dislikes counters."""

    period: MonthPeriod
    most_liked_members: list[MemberRecord] = field(default_factory=list)
    most_disliked_members: list[MemberRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.most_liked_members and not self.most_disliked_members

    def to_dict(self) -> dict:
        return {
            "period": str(self.period),
            "most_liked_members": [m.to_dict() for m in self.most_liked_members],
            "most_disliked_members": [m.to_dict() for m in self.most_disliked_members],
        }


@dataclass(frozen=True, slots=True)
class MemberSummary:
    """Leaders for every tracked counter in one period."""

    period: MonthPeriod
    leaders: dict[Counter, list[MemberRecord]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not any(self.leaders.values())

    def to_dict(self) -> dict:
        return {
            "period": str(self.period),
            "leaders": {
                counter.value: [m.to_dict() for m in members]
                for counter, members in self.leaders.items()
            },
        }
