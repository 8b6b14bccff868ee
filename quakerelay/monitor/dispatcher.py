"""Central alert dispatcher: region filter, then fan-out to every channel."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from quakerelay.monitor.channels import NotificationChannel
from quakerelay.monitor.types import AlertMessage, DispatchResult

logger = structlog.get_logger(__name__)

FIELD_VALUE_SEPARATOR = ", "


def message_regions(msg: AlertMessage) -> set[str]:
    """Regions an alert mentions.

    Uses the structured ``regions`` when present, otherwise splits the
    rendered field values.
    """
    if msg.regions:
        return set(msg.regions)
    regions: set[str] = set()
    for f in msg.fields:
        regions.update(part for part in f.value.split(FIELD_VALUE_SEPARATOR) if part)
    return regions


class AlertDispatcher:
    """Sends alerts to every configured channel independently.

    - When *target_regions* is non-empty, an alert is sent only if it
      mentions at least one of them; otherwise it is skipped.
    - Each channel gets a single attempt; one failure never prevents
      delivery to the others.
    - The aggregate ``sent/total`` is logged when *verbose* is set; failed
      channels are always logged.
    """

    def __init__(
        self,
        channels: list[NotificationChannel] | None = None,
        target_regions: Iterable[str] | None = None,
        verbose: bool = True,
    ) -> None:
        self._channels: list[NotificationChannel] = channels or []
        self._targets = frozenset(target_regions or ())
        self._verbose = verbose

    @property
    def channels(self) -> list[NotificationChannel]:
        return list(self._channels)

    @property
    def target_regions(self) -> frozenset[str]:
        return self._targets

    def should_send(self, msg: AlertMessage) -> bool:
        if not self._targets:
            return True
        return not self._targets.isdisjoint(message_regions(msg))

    async def dispatch(self, msg: AlertMessage) -> DispatchResult:
        """Filter, then deliver *msg* to all channels concurrently."""
        total = len(self._channels)
        if not self.should_send(msg):
            if self._verbose:
                logger.info(
                    "webhook_skipped",
                    reason="no target prefectures affected",
                    targets=sorted(self._targets),
                )
            return DispatchResult(sent=0, total=total, skipped=True)

        outcomes = await asyncio.gather(
            *(self._send_one(ch, msg) for ch in self._channels)
        )

        failed = tuple(ch.name for ch, ok in zip(self._channels, outcomes) if not ok)
        for name in failed:
            logger.warning("webhook_failed", channel=name)

        result = DispatchResult(sent=total - len(failed), total=total, failed=failed)
        if self._verbose:
            logger.info("webhook_sent", sent=result.sent, total=result.total)
        return result

    async def _send_one(self, ch: NotificationChannel, msg: AlertMessage) -> bool:
        try:
            return bool(await ch.send(msg))
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("channel_dispatch_error", channel=ch.name, title=msg.title)
            return False

    # ── Lifecycle ───────────────────────────────────────────────

    async def close(self) -> None:
        for ch in self._channels:
            try:
                await ch.close()
            except Exception:
                logger.exception("channel_close_error", channel=ch.name)
