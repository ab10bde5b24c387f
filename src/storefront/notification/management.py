"""Recording, reading and deleting notifications."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.notification.notification import Notification, NotificationType
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Notification")
class RecordNotification:
    user_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    message = Text(required=True)
    notification_type = String(choices=NotificationType, default=NotificationType.OTHER.value)
    data = Text()  # JSON object
    reference_id = Identifier()


@storefront.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command(part_of="Notification")
class MarkAllNotificationsRead:
    user_id = Identifier(required=True)


@storefront.command(part_of="Notification")
class DeleteNotification:
    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Notification)
class NotificationManagementHandler:
    @handle(RecordNotification)
    def record_notification(self, command):
        notification = Notification.record(
            user_id=command.user_id,
            title=command.title,
            message=command.message,
            notification_type=command.notification_type,
            data=json.loads(command.data) if command.data else None,
            reference_id=command.reference_id,
        )
        current_domain.repository_for(Notification).add(notification)

        logger.info(
            "notification_recorded",
            notification_id=str(notification.id),
            user_id=str(command.user_id),
            notification_type=notification.notification_type,
        )
        return str(notification.id)

    @handle(MarkNotificationRead)
    def mark_notification_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.find_for_user(command.notification_id, command.user_id)
        if notification.mark_read():
            repo.add(notification)
        return str(notification.id)

    @handle(MarkAllNotificationsRead)
    def mark_all_notifications_read(self, command):
        repo = current_domain.repository_for(Notification)
        flipped = 0
        for notification in repo.unread_for_user(command.user_id):
            if notification.mark_read():
                repo.add(notification)
                flipped += 1
        return flipped

    @handle(DeleteNotification)
    def delete_notification(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.find_for_user(command.notification_id, command.user_id)
        notification.delete()
        repo.add(notification)
        logger.info("notification_deleted", notification_id=str(notification.id), user_id=str(command.user_id))
