"""Notification aggregate: a message stored for a user, optionally pushed.

The stored record is the durable part: it is what the user lists, reads and
deletes. Push delivery is best-effort and only ever annotates the record
with its outcome.

Push lifecycle:
    PENDING → SENT
    PENDING → FAILED
    PENDING → SKIPPED   (no device token registered)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.notification.events import (
    NotificationDeleted,
    NotificationRead,
    NotificationRecorded,
    PushDelivered,
    PushFailed,
    PushSkipped,
)


class NotificationType(Enum):
    ORDER = "order"
    PROMOTION = "promotion"
    SYSTEM = "system"
    OTHER = "other"


class PushStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


NOTIFICATION_TYPES = [t.value for t in NotificationType]


@storefront.aggregate
class Notification:
    # Recipient
    user_id: Identifier(required=True)

    # Content
    title: String(required=True, max_length=255)
    message: Text(required=True)
    notification_type: String(choices=NotificationType, default=NotificationType.OTHER.value)
    data: Text()  # JSON object
    reference_id: Identifier()  # e.g. the order the notification is about

    is_read: Boolean(default=False)

    # Deleted notifications are hidden from their owner but kept, so that
    # reconciliation never records them again
    is_deleted: Boolean(default=False)
    deleted_at: DateTime()

    # Push delivery
    push_status: String(choices=PushStatus, default=PushStatus.PENDING.value)
    push_attempts: Integer(default=0)
    push_error: String(max_length=500)

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def record(cls, user_id, title, message, notification_type=None, data=None, reference_id=None):
        now = datetime.now(UTC)
        notification_type = notification_type or NotificationType.OTHER.value

        notification = cls(
            user_id=user_id,
            title=title,
            message=message,
            notification_type=notification_type,
            data=json.dumps(data) if data is not None else None,
            reference_id=reference_id,
            is_read=False,
            is_deleted=False,
            push_status=PushStatus.PENDING.value,
            push_attempts=0,
            created_at=now,
            updated_at=now,
        )

        notification.raise_(
            NotificationRecorded(
                notification_id=str(notification.id),
                user_id=str(user_id),
                notification_type=notification_type,
                reference_id=str(reference_id) if reference_id else None,
                created_at=now,
            )
        )
        return notification

    @property
    def payload(self) -> dict:
        return json.loads(self.data) if self.data else {}

    def belongs_to(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def mark_read(self) -> bool:
        """Flip the notification to read. Returns False if it already was."""
        if self.is_read:
            return False

        now = datetime.now(UTC)
        self.is_read = True
        self.updated_at = now

        self.raise_(NotificationRead(notification_id=str(self.id), user_id=str(self.user_id), read_at=now))
        return True

    def delete(self):
        if self.is_deleted:
            raise ValidationError({"notification": ["Notification is already deleted"]})

        now = datetime.now(UTC)
        self.is_deleted = True
        self.deleted_at = now
        self.updated_at = now

        self.raise_(
            NotificationDeleted(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                reference_id=str(self.reference_id) if self.reference_id else None,
                deleted_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Push outcome
    # -------------------------------------------------------------------
    def _assert_push_pending(self):
        if self.push_status != PushStatus.PENDING.value:
            raise ValidationError({"push_status": [f"Push outcome already recorded as {self.push_status}"]})

    def mark_pushed(self, attempts):
        self._assert_push_pending()

        now = datetime.now(UTC)
        self.push_status = PushStatus.SENT.value
        self.push_attempts = attempts
        self.push_error = None
        self.updated_at = now

        self.raise_(
            PushDelivered(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                attempts=attempts,
                delivered_at=now,
            )
        )

    def mark_push_failed(self, reason, attempts):
        self._assert_push_pending()

        now = datetime.now(UTC)
        self.push_status = PushStatus.FAILED.value
        self.push_attempts = attempts
        self.push_error = (reason or "Unknown push error")[:500]
        self.updated_at = now

        self.raise_(
            PushFailed(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                attempts=attempts,
                reason=self.push_error,
                failed_at=now,
            )
        )

    def mark_push_skipped(self, reason):
        self._assert_push_pending()

        now = datetime.now(UTC)
        self.push_status = PushStatus.SKIPPED.value
        self.push_error = reason
        self.updated_at = now

        self.raise_(
            PushSkipped(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                reason=reason,
                skipped_at=now,
            )
        )

    def as_response(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "title": self.title,
            "message": self.message,
            "notification_type": self.notification_type,
            "is_read": self.is_read,
            "data": self.payload,
            "reference_id": str(self.reference_id) if self.reference_id else None,
            "push_status": self.push_status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
