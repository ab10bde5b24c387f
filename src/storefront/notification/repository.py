"""Query methods for the Notification aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.errors import NotFoundError
from storefront.notification.notification import Notification
from storefront.notification.templates import OrderPlacedTemplate
from storefront.order.repository import page_count


@storefront.repository(part_of=Notification)
class NotificationRepository:
    def find_for_user(self, notification_id, user_id) -> Notification:
        try:
            notification = self.get(notification_id)
        except ObjectNotFoundError:
            raise NotFoundError("Notification", notification_id) from None
        if notification.is_deleted or not notification.belongs_to(user_id):
            raise NotFoundError("Notification", notification_id)
        return notification

    def list_for_user(
        self,
        user_id,
        unread_only=False,
        notification_type=None,
        start_date=None,
        end_date=None,
        page=1,
        limit=10,
    ) -> dict:
        """Newest-first page of a user's notifications.

        ``unread_count`` ignores the filters: it is the badge count of every
        unread notification the user has.
        """
        criteria = {"user_id": str(user_id), "is_deleted": False}
        if unread_only:
            criteria["is_read"] = False
        if notification_type:
            criteria["notification_type"] = notification_type
        if start_date:
            criteria["created_at__gte"] = start_date
        if end_date:
            criteria["created_at__lte"] = end_date

        results = (
            self._dao.query.filter(**criteria).order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
        )
        return {
            "notifications": results.items,
            "total": results.total,
            "page": page,
            "pages": page_count(results.total, limit),
            "unread_count": self.unread_count(user_id),
        }

    def unread_count(self, user_id) -> int:
        return self._dao.query.filter(user_id=str(user_id), is_read=False, is_deleted=False).all().total

    def unread_for_user(self, user_id, batch_size=100) -> list[Notification]:
        """Every unread notification of the user, read in full before anything is changed."""
        unread = []
        offset = 0
        while True:
            batch = (
                self._dao.query.filter(user_id=str(user_id), is_read=False, is_deleted=False)
                .order_by("created_at")
                .offset(offset)
                .limit(batch_size)
                .all()
                .items
            )
            unread.extend(batch)
            if len(batch) < batch_size:
                return unread
            offset += batch_size

    def has_placement_notification(self, user_id, order_id) -> bool:
        """Whether the "order placed" notification for ``order_id`` was stored.

        Deleted notifications count: the user already received and dismissed it.
        """
        return bool(
            self._dao.query.filter(
                user_id=str(user_id),
                reference_id=str(order_id),
                notification_type=OrderPlacedTemplate.notification_type,
                title=OrderPlacedTemplate.title,
            )
            .all()
            .total
        )
