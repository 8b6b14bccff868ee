#!/usr/bin/env python3
"""Relay entrypoint. Wires the feed, relay and dispatcher and runs until stopped.

Usage::

    # Run with default config (config/settings.yaml + environment)
    python scripts/run.py

    # Custom config file
    python scripts/run.py --config config/settings.yaml

    # Override log level
    python scripts/run.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys

import structlog

from quakerelay.core.config import ConfigError, load_settings
from quakerelay.core.logging import setup_logging
from quakerelay.feeds.p2pquake import P2PQuakeFeed
from quakerelay.monitor.factory import create_dispatcher
from quakerelay.relay import QuakeRelay

logger = structlog.get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    """Start the relay and run until interrupted."""
    try:
        settings = load_settings(args.config)
        settings.discord.require_webhooks()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    setup_logging(settings.logging, level=args.log_level)

    logger.info(
        "relay_starting",
        run_mode=settings.feed.run_mode,
        webhooks=len(settings.discord.webhook_urls),
        mention=settings.discord.mention_enabled,
        target_prefectures=settings.discord.target_prefectures,
    )

    dispatcher = create_dispatcher(settings.discord, settings.logging)
    relay = QuakeRelay(
        dispatcher=dispatcher,
        sandbox=settings.feed.is_sandbox,
        verbose=settings.logging.verbose,
    )
    feed = P2PQuakeFeed(
        ws_url=settings.feed.ws_url,
        handler=relay.handle_message,
        reconnect_base_secs=settings.feed.reconnect_base_secs,
        reconnect_cap_secs=settings.feed.reconnect_cap_secs,
        reconnect_stable_secs=settings.feed.reconnect_stable_secs,
    )

    await feed.start()

    # ── Wait for shutdown signal ─────────────────────────────────
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        await stop_event.wait()
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")

    # ── Graceful shutdown ────────────────────────────────────────
    logger.info("relay_shutting_down", messages=feed.messages_received)

    try:
        await feed.stop()
    except Exception:
        logger.exception("feed_stop_error")

    await dispatcher.close()
    logger.info("relay_stopped")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Relay P2PQuake reports to Discord")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override log level (DEBUG, INFO, WARNING, ERROR)",
    )
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
