"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Notification")
class NotificationRecorded:
    """A notification was stored for a user and is ready for push delivery."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    notification_type: String(required=True)
    reference_id: Identifier()
    created_at: DateTime(required=True)


@storefront.event(part_of="Notification")
class NotificationRead:
    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    read_at: DateTime(required=True)


@storefront.event(part_of="Notification")
class PushDelivered:
    """The push provider accepted the message."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    attempts: Integer(required=True)
    delivered_at: DateTime(required=True)


@storefront.event(part_of="Notification")
class PushFailed:
    """Every push attempt failed. The stored notification is unaffected."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    attempts: Integer(required=True)
    reason: String(required=True)
    failed_at: DateTime(required=True)


@storefront.event(part_of="Notification")
class PushSkipped:
    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    reason: String(required=True)
    skipped_at: DateTime(required=True)


@storefront.event(part_of="Notification")
class NotificationDeleted:
    """The owner deleted the notification. The record is kept, hidden from every listing."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    reference_id: Identifier()
    deleted_at: DateTime(required=True)
