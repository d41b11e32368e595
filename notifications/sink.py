"""
Purpose: Notification sinks consumed by the scheduler.
What it does:
- NotificationSink: the two calls the scheduler makes (notify_user, notify_sms).
- HttpNotificationSink: forwards to the HTTP gateway through NotificationClient.
- InMemoryNotificationSink: keeps an inbox of Notification records per user
  (with a read flag) and an SMS outbox. Used in development and tests.
- deliver_safely: fire-and-forget wrapper, logs failures and never raises.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from .client import NotificationClient
from .messages import PushMessage

logger = logging.getLogger(__name__)


class NotificationSink:
    """
    Interface for push + SMS delivery. Both calls are fire-and-forget:
    the scheduler never consumes a return value.
    """
    def notify_user(self, user_id: str, message: PushMessage) -> None:
        raise NotImplementedError

    def notify_sms(self, phone: str, message: str) -> None:
        raise NotImplementedError


class HttpNotificationSink(NotificationSink):
    def __init__(self, client: NotificationClient):
        self.client = client

    def notify_user(self, user_id: str, message: PushMessage) -> None:
        self.client.send_push(user_id, message.title, message.body, message.metadata)

    def notify_sms(self, phone: str, message: str) -> None:
        self.client.send_sms(phone, message)


@dataclass
class Notification:
    user_id: str
    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)
    read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryNotificationSink(NotificationSink):
    def __init__(self):
        self._lock = threading.Lock()
        self.notifications: List[Notification] = []
        self.sms: List[Tuple[str, str]] = []  # (phone, message)

    def notify_user(self, user_id: str, message: PushMessage) -> None:
        logger.info("Push to %s: %s - %s", user_id, message.title, message.body)
        with self._lock:
            self.notifications.append(
                Notification(user_id=user_id, title=message.title, body=message.body, data=dict(message.metadata))
            )

    def notify_sms(self, phone: str, message: str) -> None:
        logger.info("SMS to %s: %s", phone, message)
        with self._lock:
            self.sms.append((phone, message))

    # --- inbox helpers ---

    def inbox(self, user_id: str, unread_only: bool = False) -> List[Notification]:
        with self._lock:
            return [
                notification for notification in self.notifications
                if notification.user_id == user_id and not (unread_only and notification.read)
            ]

    def mark_all_read(self, user_id: str) -> int:
        marked = 0
        with self._lock:
            for notification in self.notifications:
                if notification.user_id == user_id and not notification.read:
                    notification.read = True
                    marked += 1
        return marked

    def sms_to(self, phone: str) -> List[str]:
        with self._lock:
            return [message for to, message in self.sms if to == phone]


def deliver_safely(send: Callable[..., Any], *args, description: Optional[str] = None) -> bool:
    """
    Calls `send(*args)` and swallows any failure after logging it.
    Returns True when the sink accepted the message.
    """
    try:
        send(*args)
        return True
    except Exception as e:
        logger.error("Notification failed (%s): %s", description or getattr(send, "__name__", "send"), e)
        return False
