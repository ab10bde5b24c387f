"""Notification sink: durable recording plus best-effort push delivery.

``record`` stores a Notification and fails loudly if it cannot. ``push``
talks to the push provider with a bounded number of attempts and never
raises; the caller only ever gets a result dict back.
"""

import json
import time

from protean.utils.globals import current_domain

from storefront.channel.disabled_push import DisabledPushAdapter
from storefront.channel.push_port import PushPort
from storefront.notification.management import RecordNotification
from storefront.notification.notification import NotificationType
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationSink:
    def __init__(self, push: PushPort, max_attempts: int = 3, backoff: float = 0.5, sleep=time.sleep):
        self.push_adapter = push
        self.max_attempts = max(max_attempts, 1)
        self.backoff = backoff
        self._sleep = sleep

    @classmethod
    def disabled(cls) -> "NotificationSink":
        return cls(DisabledPushAdapter(), max_attempts=1, backoff=0)

    @classmethod
    def from_settings(cls, settings, push: PushPort) -> "NotificationSink":
        return cls(
            push,
            max_attempts=settings.push_max_attempts,
            backoff=settings.push_retry_backoff_seconds,
        )

    def record(
        self,
        user_id,
        title,
        message,
        notification_type=NotificationType.OTHER.value,
        data=None,
        reference_id=None,
    ):
        """Store a notification for ``user_id`` and return its id."""
        return current_domain.process(
            RecordNotification(
                user_id=str(user_id),
                title=title,
                message=message,
                notification_type=notification_type,
                data=json.dumps(data) if data is not None else None,
                reference_id=str(reference_id) if reference_id else None,
            ),
            asynchronous=False,
        )

    def push(self, device_token, title, body, data=None) -> dict:
        """Deliver one push, retrying failed attempts with linear backoff."""
        error = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = self.push_adapter.send(device_token=device_token, title=title, body=body, data=data)
            except Exception as exc:
                result = {"status": "failed", "error": str(exc)}

            status = result.get("status")
            if status in ("sent", "skipped"):
                return {**result, "attempts": attempt}

            error = result.get("error") or "Unknown push error"
            logger.warning("push_attempt_failed", attempt=attempt, max_attempts=self.max_attempts, error=error)
            if attempt < self.max_attempts and self.backoff:
                self._sleep(self.backoff * attempt)

        return {"message_id": None, "status": "failed", "error": error, "attempts": self.max_attempts}


_sink: NotificationSink | None = None


def install_sink(sink: NotificationSink) -> None:
    """Make ``sink`` the one used by the workflow and the push dispatcher."""
    global _sink
    _sink = sink


def current_sink() -> NotificationSink:
    """The installed sink, or one that stores notifications without pushing."""
    if _sink is None:
        return NotificationSink.disabled()
    return _sink


def reset_sink() -> None:
    global _sink
    _sink = None
