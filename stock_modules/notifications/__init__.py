"""Incoming-transfer notifications (``stock_modules.notifications``)."""

from stock_modules.notifications.emitter import (
    DEFAULT_TEXTS,
    Notification,
    NotificationEmitter,
    NotificationSink,
    NotificationText,
    format_quantity,
)

__all__ = [
    "DEFAULT_TEXTS",
    "Notification",
    "NotificationEmitter",
    "NotificationSink",
    "NotificationText",
    "format_quantity",
]
