"""
slackstats.api.main — FastAPI application entry point
======================================================

Run with::

    uvicorn slackstats.api.main:app --port 8080

or ``slackstats serve``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

load_dotenv()

from slackstats import __version__  # noqa: E402
from slackstats.api.deps import get_engine  # noqa: E402
from slackstats.api.routes.admin import router as admin_router  # noqa: E402
from slackstats.api.routes.public import router as public_router  # noqa: E402
from slackstats.api.routes.slack import router as slack_router  # noqa: E402
from slackstats.database.engine import init_db  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — warm the DB engine and ensure tables exist."""
    engine = get_engine()
    init_db(engine)
    logger.info("SlackStats API started — engine ready (%s)", engine.url.database)
    yield
    engine.dispose()
    logger.info("SlackStats API shutting down")


app = FastAPI(
    title="SlackStats API",
    version=__version__,
    lifespan=lifespan,
)

# Mount routers
app.include_router(slack_router)
app.include_router(public_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/ping", response_class=PlainTextResponse)
def ping():
    return "pong\n"


@app.get("/api/health")
def health():
    return {"status": "ok"}
