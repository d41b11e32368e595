#Marks notifications as a package.
#Re-exports the sink API (NotificationSink, HttpNotificationSink, InMemoryNotificationSink,
#deliver_safely) and the gateway client so other modules import from notifications
#without knowing internal file names.
#No business logic.

from .client import NotificationClient, NotificationError
from .messages import PushMessage, format_datetime, format_time
from .sink import (
    HttpNotificationSink,
    InMemoryNotificationSink,
    Notification,
    NotificationSink,
    deliver_safely,
)

__all__ = [
    "NotificationClient",
    "NotificationError",
    "PushMessage",
    "format_datetime",
    "format_time",
    "HttpNotificationSink",
    "InMemoryNotificationSink",
    "Notification",
    "NotificationSink",
    "deliver_safely",
]
