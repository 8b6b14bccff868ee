"""Core module: config, feed types, logging."""

from quakerelay.core.config import (
    ConfigError,
    DiscordConfig,
    EnvSettings,
    FeedConfig,
    LoggingConfig,
    Settings,
    load_settings,
)
from quakerelay.core.logging import setup_logging
from quakerelay.core.types import (
    Earthquake,
    FeedMessage,
    Hypocenter,
    Issue,
    MessageCode,
    ObservationPoint,
    QuakeReport,
    UnhandledMessage,
)

__all__ = [
    "ConfigError",
    "DiscordConfig",
    "Earthquake",
    "EnvSettings",
    "FeedConfig",
    "FeedMessage",
    "Hypocenter",
    "Issue",
    "LoggingConfig",
    "MessageCode",
    "ObservationPoint",
    "QuakeReport",
    "Settings",
    "UnhandledMessage",
    "load_settings",
    "setup_logging",
]
