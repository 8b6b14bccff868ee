"""Upstream feed connector: websocket lifecycle and reconnect policy."""

from quakerelay.feeds.backoff import ReconnectBackoff
from quakerelay.feeds.exceptions import FeedConnectionError, FeedError, FeedParseError
from quakerelay.feeds.p2pquake import ConnectionState, MessageHandler, P2PQuakeFeed

__all__ = [
    "ConnectionState",
    "FeedConnectionError",
    "FeedError",
    "FeedParseError",
    "MessageHandler",
    "P2PQuakeFeed",
    "ReconnectBackoff",
]
