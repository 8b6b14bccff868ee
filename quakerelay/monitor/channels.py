"""Notification channels: webhook delivery of alert embeds."""

from __future__ import annotations

import abc

import aiohttp
import structlog

from quakerelay.monitor.types import AlertMessage

logger = structlog.get_logger(__name__)

MENTION_EVERYONE = "@everyone"

DEFAULT_TIMEOUT_SECS = 10.0


def mask_url(url: str) -> str:
    """Hide the token segment of a webhook URL for logging."""
    head, sep, _token = url.rstrip("/").rpartition("/")
    if not sep or "://" not in head:
        return "***"
    return f"{head}/***"


class NotificationChannel(abc.ABC):
    """Base class for alert delivery channels."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Identifier safe to log."""

    @abc.abstractmethod
    async def send(self, msg: AlertMessage) -> bool:
        """Send an alert message. Returns True on success."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release resources (HTTP sessions, etc.)."""


class WebhookChannel(NotificationChannel):
    """Delivers alerts to one Discord-compatible webhook as an embed.

    A single attempt is made per alert. Any status >= 400 or transport
    error is a failure; nothing is raised.
    """

    def __init__(
        self,
        webhook_url: str,
        mention: bool = False,
        timeout_secs: float = DEFAULT_TIMEOUT_SECS,
    ) -> None:
        self._webhook_url = webhook_url
        self._mention = mention
        self._timeout = aiohttp.ClientTimeout(total=timeout_secs)
        self._session: aiohttp.ClientSession | None = None

    @property
    def name(self) -> str:
        return mask_url(self._webhook_url)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    def build_payload(self, msg: AlertMessage) -> dict[str, object]:
        payload: dict[str, object] = {"embeds": [msg.to_embed()]}
        if self._mention:
            payload["content"] = MENTION_EVERYONE
        return payload

    async def send(self, msg: AlertMessage) -> bool:
        payload = self.build_payload(msg)
        try:
            session = self._get_session()
            async with session.post(self._webhook_url, json=payload) as resp:
                if resp.status < 400:
                    return True
                body = await resp.text()
                logger.warning(
                    "webhook_send_failed",
                    channel=self.name,
                    status=resp.status,
                    body=body[:200],
                )
                return False
        except Exception:
            logger.exception("webhook_send_error", channel=self.name)
            return False

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
