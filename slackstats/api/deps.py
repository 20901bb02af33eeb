"""
slackstats.api.deps — FastAPI dependency injection
===================================================
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt.exceptions import InvalidTokenError
from slack_sdk.signature import SignatureVerifier
from sqlalchemy import Engine

from slackstats.config import StatsConfig, load_config
from slackstats.database.engine import create_db_engine
from slackstats.services.leaderboard_service import LeaderboardService
from slackstats.services.member_store import MemberStore
from slackstats.services.publisher import SlackPublisher
from slackstats.services.reconciliation_service import ReconciliationEngine

_WEAK_SECRETS = frozenset({
    "slackstats-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def load_jwt_secret() -> str:
    """Load and validate JWT_SECRET from the environment.

    Raises RuntimeError if the secret is missing, blank, too short
    (< 32 chars), or a known weak default.
    """
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError(
            "JWT_SECRET environment variable is not set. "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> StatsConfig:
    return load_config(os.getenv("SLACKSTATS_CONFIG", "config.yaml"), missing_ok=True)


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------
def get_store(engine: Annotated[Engine, Depends(get_engine)]) -> MemberStore:
    return MemberStore(engine)


def get_reconciler(
    store: Annotated[MemberStore, Depends(get_store)],
    cfg: Annotated[StatsConfig, Depends(get_config)],
) -> ReconciliationEngine:
    return ReconciliationEngine(store, ignored_uids=cfg.ignored_uids)


def get_leaderboard_service(
    store: Annotated[MemberStore, Depends(get_store)],
) -> LeaderboardService:
    return LeaderboardService(store)


# ---------------------------------------------------------------------------
# Slack
# ---------------------------------------------------------------------------
def get_signature_verifier() -> SignatureVerifier:
    secret = os.getenv("SLACK_SIGNING_SECRET", "")
    if not secret:
        raise HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE, "SLACK_SIGNING_SECRET is not configured"
        )
    return SignatureVerifier(signing_secret=secret)


def get_publisher() -> SlackPublisher:
    token = os.getenv("SLACK_BOT_TOKEN", "")
    if not token:
        raise HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE, "SLACK_BOT_TOKEN is not configured"
        )
    return SlackPublisher.from_token(token)


# ---------------------------------------------------------------------------
# Admin auth
# ---------------------------------------------------------------------------
def get_current_admin(
    authorization: Annotated[str | None, Header()] = None,
) -> dict:
    """Validate JWT and return admin payload. Raises 401/403 if invalid."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, load_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except InvalidTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")
    if not payload.get("is_admin"):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not admin")
    return payload
