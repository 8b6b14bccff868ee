"""Exception hierarchy for the upstream feed connector."""

from __future__ import annotations


class FeedError(Exception):
    """Base exception for all feed errors."""


class FeedConnectionError(FeedError):
    """Failed to connect to, or lost, the websocket stream."""


class FeedParseError(FeedError):
    """Failed to parse a message received from the stream."""
