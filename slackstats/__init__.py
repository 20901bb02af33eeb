"""
SlackStats — Monthly Reaction Leaderboards for Slack
=====================================================
Listens to Slack ``reaction_added`` / ``reaction_removed`` webhooks, keeps
per-member, per-month like/dislike counters, and publishes a monthly
leaderboard back into a Slack channel.

Package layout::

    slackstats/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Reaction names, sentinel identities
    ├── errors.py          # Domain exception hierarchy
    ├── cli.py             # serve / ping / monthly-update
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # Member ORM model
    ├── engine/
    │   ├── period.py      # MonthPeriod + injectable clock
    │   ├── events.py      # ReactionEvent + Slack payload normalizer
    │   └── counters.py    # Counter tuple, pure delta, snapshots
    ├── services/
    │   ├── member_store.py           # Member Record Store
    │   ├── reconciliation_service.py # Event → counter mutation
    │   ├── leaderboard_service.py    # Max-per-counter aggregation
    │   └── publisher.py              # Block Kit summary publisher
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Dependency providers
        └── routes/        # Slack webhooks + public/admin JSON endpoints
"""

__version__ = "0.1.0"
