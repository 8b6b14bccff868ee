"""Alert formatting and webhook dispatch subsystem."""

from quakerelay.monitor.channels import NotificationChannel, WebhookChannel
from quakerelay.monitor.dispatcher import AlertDispatcher
from quakerelay.monitor.factory import create_dispatcher
from quakerelay.monitor.formatters import format_quake_alert, format_quake_report
from quakerelay.monitor.types import AlertField, AlertMessage, DispatchResult

__all__ = [
    "AlertDispatcher",
    "AlertField",
    "AlertMessage",
    "DispatchResult",
    "NotificationChannel",
    "WebhookChannel",
    "create_dispatcher",
    "format_quake_alert",
    "format_quake_report",
]
