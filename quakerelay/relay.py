"""Per-message pipeline: classify, normalize, format, dispatch."""

from __future__ import annotations

import structlog

from quakerelay.core.types import QuakeReport
from quakerelay.monitor.dispatcher import AlertDispatcher
from quakerelay.monitor.formatters import format_quake_report
from quakerelay.monitor.types import DispatchResult
from quakerelay.quake.parser import parse_message

logger = structlog.get_logger(__name__)


class QuakeRelay:
    """Turns raw feed frames into webhook alerts.

    ``handle_message`` is the feed's message handler and never raises:
    malformed frames, unknown discriminators and reports with an
    unrecognized maximum intensity are logged and dropped.
    """

    def __init__(
        self,
        dispatcher: AlertDispatcher,
        sandbox: bool = False,
        verbose: bool = True,
    ) -> None:
        self._dispatcher = dispatcher
        self._sandbox = sandbox
        self._verbose = verbose

    async def handle_message(self, raw: str | bytes) -> None:
        try:
            await self.process_message(raw)
        except Exception:
            logger.exception("relay_handle_error")

    async def process_message(self, raw: str | bytes) -> DispatchResult | None:
        """Run one frame through the pipeline; None if nothing was dispatched."""
        if self._sandbox:
            logger.info("message_received")

        message = parse_message(raw)
        if message is None:
            return None

        if not isinstance(message, QuakeReport):
            if self._sandbox:
                logger.info("message_ignored", code=message.code)
            return None

        return await self.handle_quake(message)

    async def handle_quake(self, report: QuakeReport) -> DispatchResult | None:
        alert = format_quake_report(report, sandbox=self._sandbox)
        if alert is None:
            logger.warning(
                "quake_scale_undefined",
                id=report.id,
                max_scale=report.earthquake.max_scale,
            )
            return None

        result = await self._dispatcher.dispatch(alert)
        if self._verbose and not result.skipped:
            logger.info(
                "quake_posted",
                id=report.id,
                sent=result.sent,
                total=result.total,
            )
        return result
