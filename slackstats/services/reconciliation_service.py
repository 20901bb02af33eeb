"""
slackstats.services.reconciliation_service — Reaction Reconciliation
=====================================================================

Turns one normalized :class:`ReactionEvent` into exactly one counter
mutation on exactly one ``members`` row.

How it works:
    1. Drop events whose target is empty, Slackbot, or a configured
       ignored id (logged, not an error).
    2. Derive the current ``MM-YYYY`` period from the injected clock — the
       month the event is *handled* in, not when the message was posted.
    3. Look the member up.  If absent, create a zero-counter baseline.  A
       :class:`ConflictError` here means a concurrent worker won the create
       race; the row now exists, so re-read it.  That is the only retry.
    4. Persist ``apply_reaction(old, event)`` through
       :meth:`MemberStore.mutate`, an atomic read-modify-write.

Events are **not** deduplicated by Slack event id: a redelivered
``reaction_added`` without its matching ``reaction_removed`` counts twice.
Add/remove pairs always converge because decrements clamp at zero.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from slackstats.engine.counters import MemberRecord, apply_reaction
from slackstats.engine.events import ReactionEvent, is_trackable_uid
from slackstats.engine.period import Clock, MonthPeriod, utc_now
from slackstats.errors import ConflictError, UnavailableError
from slackstats.services.member_store import Absent, MemberStore

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """Applies reaction events to the member store.

    All methods are synchronous — call via ``await run_db(engine.reconcile, ...)``.
    """

    def __init__(
        self,
        store: MemberStore,
        clock: Clock = utc_now,
        ignored_uids: Iterable[str] = (),
    ) -> None:
        self.store = store
        self._clock = clock
        self.ignored_uids: frozenset[str] = frozenset(ignored_uids)

    def current_period(self) -> MonthPeriod:
        return MonthPeriod.current(self._clock)

    def reconcile(self, event: ReactionEvent) -> MemberRecord | None:
        """Apply *event* and return the updated member snapshot.

        Returns ``None`` when the event targets a non-human identity.
        Store failures propagate as :class:`UnavailableError`.
        """
        if not is_trackable_uid(event.target_uid, self.ignored_uids):
            logger.info(
                "Ignoring %s reaction for untracked target %r",
                event.role, event.target_uid,
            )
            return None

        period = self.current_period()
        member = self._find_or_create(event.target_uid, period)

        updated = self.store.mutate(
            member.id,
            lambda counters: apply_reaction(counters, event),
        )
        logger.info(
            "Reconciled %s %s %s for %s in %s → %s",
            event.direction, event.polarity, event.role,
            event.target_uid, period, updated.counters.as_dict(),
        )
        return updated

    def _find_or_create(self, slack_uid: str, period: MonthPeriod) -> MemberRecord:
        result = self.store.lookup(slack_uid, period)
        if not isinstance(result, Absent):
            return result.member

        try:
            return self.store.create(slack_uid, period)
        except ConflictError:
            logger.info(
                "Lost create race for %s in %s — re-reading existing row",
                slack_uid, period,
            )

        result = self.store.lookup(slack_uid, period)
        if isinstance(result, Absent):
            raise UnavailableError(
                f"member {slack_uid!r} for {period} vanished after a create conflict"
            )
        return result.member
