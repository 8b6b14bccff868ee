"""Classify raw feed messages by discriminator and decode known variants."""

from __future__ import annotations

import json
from typing import Any

import structlog
from pydantic import ValidationError

from quakerelay.core.types import FeedMessage, MessageCode, QuakeReport, UnhandledMessage
from quakerelay.feeds.exceptions import FeedParseError

logger = structlog.get_logger(__name__)


def _load_object(raw: str | bytes) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise FeedParseError("message is not valid JSON") from exc
    if not isinstance(data, dict):
        raise FeedParseError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _code_of(data: dict[str, Any]) -> int:
    code = data.get("code")
    # bool is an int subclass; a float like 551.0 is accepted.
    if isinstance(code, bool) or not isinstance(code, (int, float)):
        raise FeedParseError("message does not contain a valid code")
    if isinstance(code, float) and not code.is_integer():
        raise FeedParseError(f"non-integral code {code}")
    return int(code)


def decode_message(raw: str | bytes) -> FeedMessage:
    """Decode a message into its variant type.

    Only the ``code`` discriminator is read before a variant is chosen;
    messages other than quake reports are never schema-validated.

    Raises:
        FeedParseError: The message is not a JSON object, has no usable
            ``code``, or a quake report fails schema validation.
    """
    data = _load_object(raw)
    code = _code_of(data)

    if code == MessageCode.JMA_QUAKE:
        try:
            return QuakeReport.model_validate(data)
        except ValidationError as exc:
            raise FeedParseError(f"invalid quake report: {exc.error_count()} errors") from exc

    return UnhandledMessage(id=str(data.get("id") or data.get("_id") or ""), code=code)


def parse_message(raw: str | bytes) -> FeedMessage | None:
    """Like :func:`decode_message` but logs and returns None on bad input."""
    try:
        return decode_message(raw)
    except FeedParseError as exc:
        logger.warning("message_dropped", reason=str(exc), raw=_preview(raw))
        return None


def _preview(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return raw[:200]
