"""Pure functions that convert quake reports into AlertMessage objects."""

from __future__ import annotations

import datetime
from collections.abc import Sequence

import structlog

from quakerelay.core.types import QuakeReport
from quakerelay.monitor.types import AlertField, AlertMessage
from quakerelay.quake.aggregator import SeverityGroup, affected_regions, group_points
from quakerelay.quake.scale import decode_scale

logger = structlog.get_logger(__name__)

QUAKE_TITLE = "Earthquake Information"
QUAKE_COLOR = 2264063  # 0x228BFF
SANDBOX_PREFIX = "This information is a test distribution\n"

_FEED_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


def parse_feed_time(value: str) -> datetime.datetime | None:
    """Parse a feed timestamp (``YYYY/MM/DD HH:MM:SS``), or None."""
    try:
        return datetime.datetime.strptime(value, _FEED_TIME_FORMAT)
    except (TypeError, ValueError):
        return None


def format_quake_alert(
    time_str: str,
    scale_label: str,
    groups: Sequence[SeverityGroup],
    sandbox: bool = False,
) -> AlertMessage:
    """Build the alert for one quake report.

    An unparsable *time_str* falls back to the current local time.
    """
    occurred = parse_feed_time(time_str)
    if occurred is None:
        logger.debug("quake_time_unparsed", time=time_str)
        occurred = datetime.datetime.now()

    prefix = SANDBOX_PREFIX if sandbox else ""
    description = (
        f"{prefix}Maximum intensity {scale_label} was received at "
        f"{occurred:%H:%M:%S} on {occurred:%Y/%m/%d}."
    )
    fields = tuple(
        AlertField(name=f"Seismic Intensity {g.label}", value=", ".join(g.regions))
        for g in groups
    )

    return AlertMessage(
        title=QUAKE_TITLE,
        description=description,
        fields=fields,
        color=QUAKE_COLOR,
        regions=affected_regions(groups),
    )


def format_quake_report(report: QuakeReport, sandbox: bool = False) -> AlertMessage | None:
    """Convert a QuakeReport to an AlertMessage.

    Returns None when the report's maximum intensity is unrecognized.
    """
    scale_label, found = decode_scale(report.earthquake.max_scale)
    if not found:
        return None
    groups = group_points(report.points)
    return format_quake_alert(report.earthquake.time, scale_label, groups, sandbox)
