"""Templates for the notifications the order workflow sends."""

from storefront.notification.notification import NotificationType


class OrderPlacedTemplate:
    notification_type = NotificationType.ORDER.value
    title = "Order Placed Successfully"

    @classmethod
    def render(cls, context: dict) -> dict:
        order_id = context["order_id"]
        return {
            "title": cls.title,
            "message": f"Your order #{order_id} has been placed successfully",
            "data": {"order_id": order_id, "type": "order_placed"},
        }


class OrderStatusUpdateTemplate:
    notification_type = NotificationType.ORDER.value
    title = "Order Status Updated"

    @classmethod
    def render(cls, context: dict) -> dict:
        order_id = context["order_id"]
        status = context["status"]
        return {
            "title": cls.title,
            "message": f"Your order #{order_id} status has been updated to {status}",
            "data": {"order_id": order_id, "status": status, "type": "order_status_update"},
        }
