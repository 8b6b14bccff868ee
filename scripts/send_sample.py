#!/usr/bin/env python3
"""Push one quake report through the relay pipeline and the real webhooks.

WARNING: with ``--send`` this posts to every configured webhook.

Usage::

    # Preview the embed only
    python scripts/send_sample.py

    # Replay a captured feed message
    python scripts/send_sample.py --file message.json

    # Actually deliver to the configured webhooks
    python scripts/send_sample.py --send
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog

from quakerelay.core.config import ConfigError, load_settings
from quakerelay.core.logging import setup_logging
from quakerelay.core.types import QuakeReport
from quakerelay.feeds.exceptions import FeedParseError
from quakerelay.monitor.factory import create_dispatcher
from quakerelay.monitor.formatters import format_quake_report
from quakerelay.quake.parser import decode_message
from quakerelay.relay import QuakeRelay

logger = structlog.get_logger(__name__)

SAMPLE_MESSAGE = {
    "code": 551,
    "id": "sample",
    "issue": {"source": "気象庁", "type": "DetailScale"},
    "earthquake": {
        "time": "2024/01/01 12:00:00",
        "hypocenter": {"name": "東京湾", "depth": 30, "magnitude": 5.2},
        "maxScale": 50,
    },
    "points": [
        {"pref": "東京都", "addr": "千代田区", "isArea": False, "scale": 50},
        {"pref": "神奈川県", "addr": "横浜市", "isArea": False, "scale": 45},
        {"pref": "大阪府", "addr": "大阪市", "isArea": False, "scale": 40},
    ],
}


async def run(args: argparse.Namespace) -> int:
    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    setup_logging(settings.logging, fmt="console")

    raw = Path(args.file).read_text(encoding="utf-8") if args.file else json.dumps(SAMPLE_MESSAGE)

    if not args.send:
        try:
            message = decode_message(raw)
        except FeedParseError as exc:
            print(f"Invalid message: {exc}", file=sys.stderr)
            return 1
        if not isinstance(message, QuakeReport):
            print(f"Not a quake report (code {message.code})", file=sys.stderr)
            return 1
        alert = format_quake_report(message, sandbox=settings.feed.is_sandbox)
        if alert is None:
            print("Maximum intensity is undefined; nothing would be sent.", file=sys.stderr)
            return 1
        print(json.dumps({"embeds": [alert.to_embed()]}, ensure_ascii=False, indent=2))
        return 0

    try:
        settings.discord.require_webhooks()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    dispatcher = create_dispatcher(settings.discord, settings.logging)
    relay = QuakeRelay(dispatcher, sandbox=settings.feed.is_sandbox)
    try:
        result = await relay.process_message(raw)
    finally:
        await dispatcher.close()

    if result is None:
        logger.warning("sample_not_dispatched")
        return 1
    logger.info("sample_dispatched", sent=result.sent, total=result.total, skipped=result.skipped)
    return 0 if result.all_sent or result.skipped else 2


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a sample quake alert")
    parser.add_argument("--config", default=None, help="Path to YAML config")
    parser.add_argument("--file", default=None, help="JSON feed message to replay")
    parser.add_argument("--send", action="store_true", help="Deliver to webhooks")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
