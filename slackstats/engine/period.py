"""
slackstats.engine.period — MonthPeriod and the Injectable Clock
================================================================

Every counter is partitioned by calendar month.  A :class:`MonthPeriod`
renders canonically as ``MM-YYYY`` (``"10-2023"``) — that string is what the
``members.period`` column stores and what the monthly-update endpoint
accepts.

Months roll over by partition, not by job: the first event handled in a new
month simply lands in a new ``MM-YYYY`` bucket.

The "current month" is derived from a :data:`Clock` passed in by the caller
rather than read from ambient global state, so month-boundary behaviour is
testable with a fixed clock.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from slackstats.errors import InvalidError

__all__ = ["Clock", "MonthPeriod", "utc_now"]

Clock = Callable[[], datetime]

_PERIOD_RE = re.compile(r"^(?P<month>[0-9]{2})-(?P<year>[0-9]{4})$")


def utc_now() -> datetime:
    """Default :data:`Clock` — timezone-aware wall-clock time in UTC."""
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True, order=True)
class MonthPeriod:
    """A calendar month.  Field order (year, month) gives chronological ordering."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidError(f"month must be within 1..12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise InvalidError(f"year must be within 1..9999, got {self.year}")

    @classmethod
    def parse(cls, raw: str) -> MonthPeriod:
        """Parse ``MM-YYYY`` (two ASCII digits, dash, four ASCII digits).

        Surrounding whitespace is ignored.

        Raises
        ------
        InvalidError
            If *raw* is not of that shape or names an impossible month.
        """
        match = _PERIOD_RE.match(raw.strip()) if isinstance(raw, str) else None
        if match is None:
            raise InvalidError(f"period must look like MM-YYYY, got {raw!r}")
        return cls(year=int(match["year"]), month=int(match["month"]))

    @classmethod
    def from_datetime(cls, moment: datetime) -> MonthPeriod:
        """The month *moment* falls in, evaluated in UTC for aware datetimes."""
        if moment.tzinfo is not None:
            moment = moment.astimezone(UTC)
        return cls(year=moment.year, month=moment.month)

    @classmethod
    def current(cls, clock: Clock = utc_now) -> MonthPeriod:
        return cls.from_datetime(clock())

    @property
    def month_name(self) -> str:
        """``"October 2023"`` — used in published summaries."""
        return f"{calendar.month_name[self.month]} {self.year}"

    def __str__(self) -> str:
        return f"{self.month:02d}-{self.year:04d}"
