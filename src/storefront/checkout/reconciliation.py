"""ReconcileOrderNotifications: store placement notifications that were lost.

Placing an order never fails because its notification could not be stored.
This command finds orders without their "order placed" notification and
records it. Running it again finds nothing to do.
"""

from protean import handle
from protean.fields import Integer
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.notification.notification import Notification
from storefront.notification.templates import OrderPlacedTemplate
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class ReconcileOrderNotifications:
    batch_size = Integer(default=100, min_value=1)


@storefront.command_handler(part_of=Order)
class ReconciliationHandler:
    @handle(ReconcileOrderNotifications)
    def reconcile(self, command):
        order_repo = current_domain.repository_for(Order)
        notification_repo = current_domain.repository_for(Notification)

        missing = [
            order
            for order in order_repo.all_orders(batch_size=command.batch_size or 100)
            if not notification_repo.has_placement_notification(order.customer_id, order.id)
        ]

        for order in missing:
            content = OrderPlacedTemplate.render({"order_id": str(order.id)})
            notification = Notification.record(
                user_id=order.customer_id,
                title=content["title"],
                message=content["message"],
                notification_type=OrderPlacedTemplate.notification_type,
                data=content["data"],
                reference_id=order.id,
            )
            notification_repo.add(notification)
            logger.info("notification_reconciled", order_id=str(order.id), user_id=str(order.customer_id))

        return len(missing)
