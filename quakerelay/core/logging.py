"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from quakerelay.core.config import LoggingConfig


def setup_logging(
    config: LoggingConfig | None = None,
    level: str | None = None,
    fmt: str | None = None,
) -> None:
    """Configure structlog with JSON or console renderer.

    Args:
        config: Logging section of the settings. Defaults are used if None.
        level: Log level override (e.g. "DEBUG").
        fmt: Renderer format override ("json" or "console").
    """
    config = config or LoggingConfig()
    log_level = getattr(logging, (level or config.level).upper(), logging.INFO)
    log_format = fmt or config.format

    shared_processors: list[structlog.types.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # websockets logs every frame at DEBUG; keep it at WARNING.
    logging.getLogger("websockets").setLevel(max(log_level, logging.WARNING))
