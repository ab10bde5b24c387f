"""Push dispatch: delivers recorded notifications to the user's device.

Reacts to NotificationRecorded. Looks up the user's device token, pushes
through the installed sink and stores the outcome on the notification.
Nothing here is allowed to fail the operation that recorded the notification.
"""

from protean import handle
from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.notification.events import NotificationRecorded
from storefront.notification.notification import Notification, PushStatus
from storefront.notification.sink import current_sink
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.event_handler(part_of=Notification)
class PushDispatcher:
    @handle(NotificationRecorded)
    def on_notification_recorded(self, event: NotificationRecorded) -> None:
        try:
            self._dispatch(event)
        except Exception as exc:
            logger.error(
                "push_dispatch_failed",
                notification_id=str(event.notification_id),
                user_id=str(event.user_id),
                error=str(exc),
            )

    def _dispatch(self, event):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(event.notification_id)

        if notification.push_status != PushStatus.PENDING.value:
            return

        device_token = current_domain.repository_for(Customer).device_token_for(notification.user_id)
        if not device_token:
            notification.mark_push_skipped("No device token registered")
            repo.add(notification)
            return

        result = current_sink().push(
            device_token,
            notification.title,
            notification.message,
            data={
                **notification.payload,
                "notification_id": str(notification.id),
                "notification_type": notification.notification_type,
            },
        )

        if result["status"] == "sent":
            notification.mark_pushed(result["attempts"])
        elif result["status"] == "skipped":
            notification.mark_push_skipped(result.get("error") or "Push skipped")
        else:
            notification.mark_push_failed(result.get("error"), result["attempts"])
            logger.warning(
                "push_delivery_failed",
                notification_id=str(notification.id),
                attempts=result["attempts"],
                error=result.get("error"),
            )
        repo.add(notification)
