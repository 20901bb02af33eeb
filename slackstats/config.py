"""
slackstats.config — YAML Configuration Loader
==============================================

**Why this file exists:**
This module reads ``config.yaml`` for **non-secret** settings (listen
address, default summary channel, ignored identities).  Secrets and the
database URL come from the environment (``.env`` via python-dotenv):

* ``DATABASE_URL``          — SQLAlchemy URL (PostgreSQL in production)
* ``SLACK_SIGNING_SECRET``  — verifies inbound Slack requests
* ``SLACK_BOT_TOKEN``       — posts the monthly summary
* ``JWT_SECRET``            — signs admin tokens

Usage::

    from slackstats.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.listen_port)       # 8080
    print(cfg.summary_channel_id)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


# ---------------------------------------------------------------------------
# Typed settings object, infrastructure only.
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class StatsConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # HTTP
    listen_host: str = "127.0.0.1"
    listen_port: int = 8080

    # Slack
    summary_channel_id: str | None = None  # Default channel for monthly updates

    # Extra Slack user ids that never collect stats (bots, integrations)
    ignored_uids: frozenset[str] = field(default_factory=frozenset)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml", *, missing_ok: bool = False) -> StatsConfig:
    """Read *path* and return a :class:`StatsConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.
    missing_ok:
        Return the defaults instead of raising when *path* doesn't exist.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist and *missing_ok* is false.
    ValueError
        If a value has the wrong shape (e.g. a non-numeric port).
    """
    config_path = Path(path)
    if not config_path.exists():
        if missing_ok:
            return StatsConfig()
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    ignored = raw.get("ignored_uids") or []
    if isinstance(ignored, str):
        ignored = [ignored]

    return StatsConfig(
        listen_host=str(raw.get("listen_host", "127.0.0.1")),
        listen_port=int(raw.get("listen_port", 8080)),
        summary_channel_id=(
            str(raw["summary_channel_id"]) if raw.get("summary_channel_id") else None
        ),
        ignored_uids=frozenset(str(uid) for uid in ignored),
    )
