"""
slackstats.errors — Domain Exceptions
======================================

Every failure the statistics engine reports is one of four kinds:

* :class:`InvalidError` — malformed input (empty identity, bad period,
  negative counter, unknown counter name).
* :class:`NotFoundError` — lookup against a key that does not exist.
* :class:`ConflictError` — uniqueness violation on a concurrent create.
  The reconciliation engine recovers from it; callers normally never see it.
* :class:`UnavailableError` — the store (or Slack) failed.  The original
  exception is chained as ``__cause__``.
"""

from __future__ import annotations


class StatsError(Exception):
    """Base class for all SlackStats domain errors."""


class InvalidError(StatsError):
    """Raised when input is malformed."""


class NotFoundError(StatsError):
    """Raised when a lookup matches no row."""


class ConflictError(StatsError):
    """Raised when an insert violates the (slack_uid, period) uniqueness."""


class UnavailableError(StatsError):
    """Raised when the backing store or an upstream service fails."""
