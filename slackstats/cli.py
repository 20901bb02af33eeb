"""
slackstats.cli — Command-line entry point
==========================================

Subcommands::

    slackstats serve                          # run the API with uvicorn
    slackstats ping http://localhost:8080     # is the server up?
    slackstats monthly-update http://localhost:8080 --channel C0123 --date 10-2023

``monthly-update`` is meant for cron: it asks a running server to publish
the leaderboard.  ``--date`` defaults to the current month and ``--channel``
to the server's configured summary channel.
"""

from __future__ import annotations

import argparse
import logging
import sys

import httpx
from dotenv import load_dotenv

from slackstats import __version__
from slackstats.config import load_config
from slackstats.engine.period import MonthPeriod
from slackstats.errors import InvalidError

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"

logger = logging.getLogger("slackstats")

REQUEST_TIMEOUT = 10.0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    cfg = load_config(args.config, missing_ok=True)
    host = args.host or cfg.listen_host
    port = args.port or cfg.listen_port
    logger.info("Starting SlackStats on %s:%d", host, port)
    uvicorn.run("slackstats.api.main:app", host=host, port=port, log_config=None)
    return 0


def _ping(args: argparse.Namespace, client: httpx.Client) -> int:
    resp = client.get(f"{args.address.rstrip('/')}/ping")
    if resp.status_code != httpx.codes.OK:
        logger.error("Unexpected status code: %d", resp.status_code)
        return 1
    print(resp.text, end="")
    return 0


def _monthly_update(args: argparse.Namespace, client: httpx.Client) -> int:
    form: dict[str, str] = {}
    if args.channel:
        form["channel"] = args.channel
    if args.date:
        try:
            form["date"] = str(MonthPeriod.parse(args.date))
        except InvalidError as exc:
            logger.error("%s", exc)
            return 2

    resp = client.post(f"{args.address.rstrip('/')}/slack/monthly-update", data=form)
    if resp.status_code != httpx.codes.OK:
        logger.error("Monthly update failed (%d): %s", resp.status_code, resp.text)
        return 1
    payload = resp.json()
    logger.info("Published %s to %s", payload.get("period"), payload.get("channel"))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slackstats",
        description="Monthly Slack reaction leaderboards.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP server")
    serve.add_argument("--config", default="config.yaml", help="YAML config file")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    ping = sub.add_parser("ping", help="ping a running server")
    ping.add_argument("address", help="base URL, e.g. http://localhost:8080")

    update = sub.add_parser(
        "monthly-update",
        help="publish the monthly leaderboard through a running server",
    )
    update.add_argument("address", help="base URL, e.g. http://localhost:8080")
    update.add_argument("--channel", default=None, help="Slack channel id")
    update.add_argument("--date", default=None, help="period as MM-YYYY")
    return parser


def main(argv: list[str] | None = None, client: httpx.Client | None = None) -> int:
    """Parse *argv* and run the chosen subcommand.  Returns the exit code."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )

    if args.command == "serve":
        return _serve(args)

    handler = _ping if args.command == "ping" else _monthly_update
    owns_client = client is None
    client = client or httpx.Client(timeout=REQUEST_TIMEOUT)
    try:
        return handler(args, client)
    except httpx.HTTPError as exc:
        logger.error("Error making request: %s", exc)
        return 1
    finally:
        if owns_client:
            client.close()


if __name__ == "__main__":
    sys.exit(main())
