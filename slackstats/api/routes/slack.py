"""
slackstats.api.routes.slack — Slack webhook endpoints
======================================================

``POST /events``
    Slack Events API.  Verifies the request signature, answers the
    ``url_verification`` handshake, and feeds reaction events to the
    reconciliation engine.  Reconciliation failures are logged and the event
    is dropped and Slack still gets a 200.

``POST /slack/monthly-update``
    Form-encoded ``channel=<id>&date=MM-YYYY``.  Computes the leaderboard and
    publishes it.  Any failure surfaces to the caller; nothing is posted.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Form, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError
from slack_sdk.signature import SignatureVerifier

from slackstats.api.deps import (
    get_config,
    get_leaderboard_service,
    get_publisher,
    get_reconciler,
    get_signature_verifier,
)
from slackstats.config import StatsConfig
from slackstats.constants import EVENT_CALLBACK, URL_VERIFICATION
from slackstats.database.engine import run_db
from slackstats.engine.events import normalize_slack_event
from slackstats.engine.period import MonthPeriod
from slackstats.errors import InvalidError, NotFoundError, UnavailableError
from slackstats.services.leaderboard_service import LeaderboardService
from slackstats.services.publisher import SlackPublisher
from slackstats.services.reconciliation_service import ReconciliationEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["slack"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class SlackEnvelope(BaseModel):
    """Outer Events API payload.  Unknown fields are ignored."""
    type: str
    challenge: str | None = None
    event_id: str | None = None
    event: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def is_signed_by_slack(verifier: SignatureVerifier, body: bytes, headers: dict[str, str]) -> bool:
    """Check ``X-Slack-Signature`` / ``X-Slack-Request-Timestamp`` against *body*."""
    try:
        return verifier.is_valid_request(body, headers)
    except ValueError:
        # Non-numeric timestamp header
        return False


# ---------------------------------------------------------------------------
# POST /events
# ---------------------------------------------------------------------------
@router.post("/events")
async def handle_events(
    request: Request,
    verifier: Annotated[SignatureVerifier, Depends(get_signature_verifier)],
    reconciler: Annotated[ReconciliationEngine, Depends(get_reconciler)],
):
    body = await request.body()
    if not is_signed_by_slack(verifier, body, dict(request.headers)):
        logger.warning("Rejected Slack request with an invalid signature")
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid Slack signature")

    try:
        envelope = SlackEnvelope.model_validate(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Malformed Slack payload")

    if envelope.type == URL_VERIFICATION:
        return PlainTextResponse(envelope.challenge or "")

    if envelope.type != EVENT_CALLBACK or envelope.event is None:
        return Response(status_code=status.HTTP_200_OK)

    for event in normalize_slack_event(envelope.event):
        try:
            await run_db(reconciler.reconcile, event)
        except Exception:
            logger.exception(
                "Dropping %s reaction event %s for %r",
                event.role, envelope.event_id, event.target_uid,
            )

    return Response(status_code=status.HTTP_200_OK)


# ---------------------------------------------------------------------------
# POST /slack/monthly-update
# ---------------------------------------------------------------------------
@router.post("/slack/monthly-update")
async def handle_monthly_update(
    leaderboards: Annotated[LeaderboardService, Depends(get_leaderboard_service)],
    publisher: Annotated[SlackPublisher, Depends(get_publisher)],
    cfg: Annotated[StatsConfig, Depends(get_config)],
    channel: Annotated[str | None, Form()] = None,
    date: Annotated[str | None, Form()] = None,
):
    """Publish the leaderboard for ``date`` (default: current month) to ``channel``."""
    channel_id = channel or cfg.summary_channel_id
    if not channel_id:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "No channel value provided")

    try:
        period = MonthPeriod.parse(date) if date else MonthPeriod.current()
    except InvalidError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc))

    try:
        board = await run_db(leaderboards.leaderboard, period, require_members=True)
    except NotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc))
    except UnavailableError as exc:
        logger.error("Leaderboard query failed for %s: %s", period, exc)
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, "Statistics store unavailable")

    try:
        ts = await run_db(publisher.publish, channel_id, board)
    except UnavailableError as exc:
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, str(exc))

    return {
        "status": "published",
        "channel": channel_id,
        "period": str(period),
        "ts": ts,
    }
