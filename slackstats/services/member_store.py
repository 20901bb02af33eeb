"""
slackstats.services.member_store — Member Record Store
=======================================================

Durable, transactional CRUD over ``members`` rows keyed by surrogate id or
by ``(slack_uid, period)``.  Pure data access: no reaction semantics live
here.

Every public method opens its own unit of work through
:func:`~slackstats.database.engine.get_session` (commit on success, rollback
on exception) and returns immutable :class:`MemberRecord` snapshots, never
live ORM rows.

Failure translation:
    * uniqueness violation on ``(slack_uid, period)`` → :class:`ConflictError`
    * any other SQLAlchemy failure                    → :class:`UnavailableError`
    * missing rows / bad input                        → :class:`NotFoundError`
      / :class:`InvalidError`, raised as-is
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import Engine, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from slackstats.database.engine import get_session
from slackstats.database.models import Member
from slackstats.engine.counters import Counter, CounterValues, MemberRecord
from slackstats.engine.period import Clock, MonthPeriod, utc_now
from slackstats.errors import (
    ConflictError,
    InvalidError,
    NotFoundError,
    StatsError,
    UnavailableError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tagged lookup result
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Found:
    member: MemberRecord


@dataclass(frozen=True, slots=True)
class Absent:
    slack_uid: str
    period: MonthPeriod


LookupResult = Found | Absent


# ---------------------------------------------------------------------------
# Row ↔ snapshot helpers
# ---------------------------------------------------------------------------
def _aware(moment: datetime) -> datetime:
    """SQLite drops tzinfo on read; every stored timestamp is UTC."""
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)


def _counters_of(row: Member) -> CounterValues:
    return CounterValues(
        received_likes=row.received_likes,
        received_dislikes=row.received_dislikes,
        given_likes=row.given_likes,
        given_dislikes=row.given_dislikes,
    )


def _to_record(row: Member) -> MemberRecord:
    return MemberRecord(
        id=row.id,
        slack_uid=row.slack_uid,
        period=MonthPeriod.parse(row.period),
        counters=_counters_of(row),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


# ---------------------------------------------------------------------------
# MemberStore
# ---------------------------------------------------------------------------
class MemberStore:
    """SQLAlchemy-backed store for :class:`~slackstats.database.models.Member`.

    All methods are synchronous — call them via
    ``await run_db(store.method, ...)`` from async code.
    """

    def __init__(self, engine: Engine, clock: Clock = utc_now) -> None:
        self.engine = engine
        self._clock = clock

    def _now(self) -> datetime:
        return _aware(self._clock()).astimezone(UTC)

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        try:
            with get_session(self.engine) as session:
                yield session
        except StatsError:
            raise
        except IntegrityError as exc:
            raise ConflictError(f"uniqueness violation: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            raise UnavailableError(f"member store failure: {exc}") from exc

    # -- reads -------------------------------------------------------------
    def find_by_id(self, member_id: int) -> MemberRecord:
        """Return the member with *member_id*.  Raises :class:`NotFoundError`."""
        with self._transaction() as session:
            row = session.get(Member, member_id)
            if row is None:
                raise NotFoundError(f"member id={member_id} not found")
            return _to_record(row)

    def find_by_identity(self, slack_uid: str, period: MonthPeriod) -> MemberRecord:
        """Return the member for ``(slack_uid, period)``.  Raises :class:`NotFoundError`."""
        result = self.lookup(slack_uid, period)
        if isinstance(result, Absent):
            raise NotFoundError(f"member {slack_uid!r} not found for {period}")
        return result.member

    def lookup(self, slack_uid: str, period: MonthPeriod) -> LookupResult:
        """Like :meth:`find_by_identity` but returns :class:`Absent` instead of raising."""
        with self._transaction() as session:
            row = session.scalar(
                select(Member).where(
                    Member.slack_uid == slack_uid,
                    Member.period == str(period),
                )
            )
            if row is None:
                return Absent(slack_uid=slack_uid, period=period)
            return Found(_to_record(row))

    def list_period(self, period: MonthPeriod) -> list[MemberRecord]:
        """All members recorded for *period*, ordered by id."""
        with self._transaction() as session:
            rows = session.scalars(
                select(Member).where(Member.period == str(period)).order_by(Member.id)
            ).all()
            return [_to_record(row) for row in rows]

    def max_by_counter(self, period: MonthPeriod, counter: Counter | str) -> list[MemberRecord]:
        """Every member of *period* whose *counter* equals the period maximum.

        Ties are all returned (ordered by id).  An empty period yields ``[]``.
        """
        counter = Counter.parse(counter)
        column = getattr(Member, counter.value)
        key = str(period)

        top = (
            select(func.max(column))
            .where(Member.period == key)
            .scalar_subquery()
        )
        with self._transaction() as session:
            rows = session.scalars(
                select(Member)
                .where(Member.period == key, column == top)
                .order_by(Member.id)
            ).all()
            return [_to_record(row) for row in rows]

    # -- writes ------------------------------------------------------------
    def create(self, slack_uid: str, period: MonthPeriod) -> MemberRecord:
        """Insert a zero-counter row for ``(slack_uid, period)``.

        Raises
        ------
        InvalidError
            If *slack_uid* is empty.
        ConflictError
            If the pair already exists.  Callers should re-read, not retry.
        """
        if not slack_uid or not slack_uid.strip():
            raise InvalidError("slack_uid is required")

        now = self._now()
        with self._transaction() as session:
            row = Member(
                slack_uid=slack_uid,
                period=str(period),
                received_likes=0,
                received_dislikes=0,
                given_likes=0,
                given_dislikes=0,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.flush()
            record = _to_record(row)

        logger.info("Created member %s for %s (id=%d)", slack_uid, period, record.id)
        return record

    def update(self, member_id: int, counters: CounterValues) -> MemberRecord:
        """Replace all counters of *member_id* with *counters* (absolute values)."""
        return self.mutate(member_id, lambda _old: counters)

    def mutate(
        self,
        member_id: int,
        change: Callable[[CounterValues], CounterValues],
    ) -> MemberRecord:
        """Atomic read-modify-write of one member's counters.

        The row is read with ``FOR UPDATE`` (ignored by SQLite), *change* maps
        the current :class:`CounterValues` to the new ones, and the result is
        written wholesale in the same transaction.
        """
        with self._transaction() as session:
            row = session.scalar(
                select(Member).where(Member.id == member_id).with_for_update()
            )
            if row is None:
                raise NotFoundError(f"member id={member_id} not found")

            new = change(_counters_of(row))
            for counter in Counter:
                setattr(row, counter.value, new.get(counter))
            row.updated_at = self._now()
            session.flush()
            record = _to_record(row)

        logger.debug("Updated member id=%d → %s", member_id, record.counters.as_dict())
        return record

    def delete(self, member_id: int) -> None:
        """Permanently delete *member_id* (administrative)."""
        with self._transaction() as session:
            row = session.get(Member, member_id)
            if row is None:
                raise NotFoundError(f"member id={member_id} not found")
            session.delete(row)
        logger.info("Deleted member id=%d", member_id)
