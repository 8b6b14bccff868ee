"""Convenience factory for wiring the notification stack."""

from __future__ import annotations

import structlog

from quakerelay.core.config import DiscordConfig, LoggingConfig
from quakerelay.monitor.channels import NotificationChannel, WebhookChannel
from quakerelay.monitor.dispatcher import AlertDispatcher
from quakerelay.quake.regions import unknown_regions

logger = structlog.get_logger(__name__)


def create_dispatcher(
    config: DiscordConfig,
    logging_config: LoggingConfig | None = None,
) -> AlertDispatcher:
    """Build one WebhookChannel per configured URL behind an AlertDispatcher."""
    unknown = unknown_regions(config.target_prefectures)
    if unknown:
        logger.warning(
            "target_prefectures_unknown",
            unknown=unknown,
            hint="names must match the romanized display names, e.g. Tokyo",
        )

    channels: list[NotificationChannel] = [
        WebhookChannel(
            url.get_secret_value(),
            mention=config.mention_enabled,
            timeout_secs=config.timeout_secs,
        )
        for url in config.webhook_urls
    ]
    verbose = logging_config.verbose if logging_config is not None else True
    return AlertDispatcher(
        channels=channels,
        target_regions=config.target_prefectures,
        verbose=verbose,
    )
