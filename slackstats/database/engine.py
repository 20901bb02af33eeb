"""
slackstats.database.engine — Database Connection & Async Helper
================================================================

**Why this file exists:**
FastAPI serves Slack webhooks on an ``asyncio`` event loop.  SQLAlchemy +
psycopg2 is **synchronous** — calling the DB directly from an ``async``
route would stall every other request until the query returns.

The bridge:

    1. A webhook arrives  (async world).
    2. The route calls ``await run_db(some_function, arg1, arg2)``.
    3. ``run_db`` ships the synchronous function to a **thread pool** via
       ``asyncio.to_thread()``.
    4. The DB work happens on a background thread — the event loop stays free.
    5. The result is awaited back in the route, which then answers Slack.

Usage::

    from slackstats.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    # Inside an async route:
    member = await run_db(reconciler.reconcile, event)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session

from slackstats.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

SQLITE_BUSY_TIMEOUT = 30  # seconds a writer waits for the lock


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` from *url* or the ``DATABASE_URL`` env var.

    For server databases the connection pool is sized for a single-workspace
    webhook service:
    * ``pool_size=5`` — five persistent connections.
    * ``max_overflow=10`` — up to 10 extra connections under load.
    * ``pool_timeout=10`` — fail after 10 s if no connection is available.
    * ``pool_recycle=3600`` — recycle connections after 1 hour.

    SQLite URLs skip pool sizing, allow cross-thread use (``run_db``
    hands connections to worker threads) and open every transaction with
    ``BEGIN IMMEDIATE`` (see :func:`_lock_sqlite_on_begin`).

    Raises
    ------
    RuntimeError
        If neither *url* nor ``DATABASE_URL`` is set.
    """
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and set a valid database URL."
        )

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
        )
        _lock_sqlite_on_begin(engine)
    else:
        engine = create_engine(
            url,
            echo=False,        # Set True for SQL debugging
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,   # Reconnect stale connections automatically
            pool_timeout=10,      # Fail after 10s instead of hanging forever
            pool_recycle=3600,    # Recycle connections after 1 hour
        )
    logger.info("Database engine created → %s", engine.url.render_as_string(hide_password=True))
    return engine


def _lock_sqlite_on_begin(engine: Engine) -> None:
    """Take SQLite's write lock when a transaction starts.

    SQLite ignores ``SELECT ... FOR UPDATE`` and pysqlite defers ``BEGIN``
    until the first write, so a read-modify-write in
    :meth:`MemberStore.mutate` would otherwise race.  This is SQLAlchemy's
    pysqlite transaction recipe with ``BEGIN IMMEDIATE``: writers queue on
    the database lock (up to :data:`SQLITE_BUSY_TIMEOUT`) instead of
    overwriting each other.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create all tables defined in :mod:`slackstats.database.models`.

    Safe to call on every startup — ``CREATE TABLE IF NOT EXISTS`` under the
    hood.

    .. note::

        In production the schema is managed by Alembic (``alembic upgrade
        head``).  ``create_all`` is retained as a safety net for dev/test
        environments where Alembic may not have run.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that auto-commits on success and rolls back
    on exception.

    Usage::

        with get_session(engine) as session:
            session.add(Member(slack_uid="U1", period="10-2023", ...))
            # commit happens automatically on block exit
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** database function on a background thread.

    Every store call made from an ``async`` route should go through this
    wrapper::

        result = await run_db(store.find_by_id, member_id)

    Under the hood it calls :func:`asyncio.to_thread`, which schedules
    *func* on the default ``ThreadPoolExecutor`` so the event loop is never
    blocked.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
