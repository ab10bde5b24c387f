"""Order workflow: the entry point the API uses for order writes.

The workflow owns what happens around the transactional commands: input
checks before anything is touched, the checkout locks, and the
notifications sent once a change is committed. A notification that cannot
be stored is logged as ``notification_degraded`` and never fails the
operation; ``ReconcileOrderNotifications`` fills the gap later.
"""

import json

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.checkout.locks import CheckoutLocks, checkout_locks
from storefront.checkout.placement import PlaceOrder
from storefront.config import Settings, get_settings
from storefront.errors import InvalidStatus, dependency_guard
from storefront.notification.notification import NotificationType
from storefront.notification.sink import NotificationSink, current_sink
from storefront.notification.templates import OrderPlacedTemplate, OrderStatusUpdateTemplate
from storefront.order.order import ORDER_STATUSES, PAYMENT_STATUSES, Order
from storefront.order.status import UpdateOrderStatus, UpdatePaymentStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ADDRESS_FIELDS = ("street", "city", "state", "zip_code")


class OrderWorkflow:
    def __init__(
        self,
        sink: NotificationSink | None = None,
        locks: CheckoutLocks | None = None,
        settings: Settings | None = None,
    ):
        self._sink = sink
        self.locks = locks or checkout_locks
        self.settings = settings or get_settings()

    @property
    def sink(self) -> NotificationSink:
        return self._sink or current_sink()

    # -------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------
    def place_order(self, user_id, shipping_address, payment_method, note=None, checkout_key=None) -> Order:
        """Turn the user's cart into an order.

        Raises:
            ValidationError: malformed input, checked before anything changes.
            EmptyCart, InsufficientStock: the cart cannot be checked out.
            DependencyError: the store failed; nothing was committed.
        """
        address = self._validate_placement(shipping_address, payment_method, note)

        with self.locks.user(user_id):
            with dependency_guard("placing order"):
                replayed = self._replayed_order(user_id, checkout_key)
            if replayed is not None:
                return replayed

            product_ids = self._cart_product_ids(user_id)
            with self.locks.products(product_ids):
                with dependency_guard("placing order"):
                    order_id = current_domain.process(
                        PlaceOrder(
                            customer_id=str(user_id),
                            shipping_address=json.dumps(address),
                            payment_method=payment_method.strip(),
                            note=note or None,
                            checkout_key=checkout_key or None,
                        ),
                        asynchronous=False,
                    )

        with dependency_guard("loading order"):
            order = current_domain.repository_for(Order).get(order_id)

        self._notify(order, OrderPlacedTemplate.render({"order_id": str(order.id)}))
        return order

    def _validate_placement(self, shipping_address, payment_method, note) -> dict:
        errors = {}
        if shipping_address is None:
            shipping_address = {}

        if not isinstance(shipping_address, dict):
            errors["shipping_address"] = ["Shipping address must be an object with street, city, state and zip code"]
        else:
            for field in ADDRESS_FIELDS:
                value = shipping_address.get(field)
                if not isinstance(value, str) or not value.strip():
                    errors[f"shipping_address.{field}"] = [f"Shipping address {field.replace('_', ' ')} is required"]
            country = shipping_address.get("country")
            if country is not None and not isinstance(country, str):
                errors["shipping_address.country"] = ["Shipping address country must be text"]

        if not isinstance(payment_method, str) or not payment_method.strip():
            errors["payment_method"] = ["Payment method is required"]

        limit = self.settings.order_note_max_length
        if note is not None and not isinstance(note, str):
            errors["note"] = ["Note must be text"]
        elif note is not None and len(note) > limit:
            errors["note"] = [f"Note must be at most {limit} characters"]

        if errors:
            raise ValidationError(errors)

        address = {field: shipping_address[field].strip() for field in ADDRESS_FIELDS}
        address["country"] = (shipping_address.get("country") or "").strip() or None
        return address

    def _replayed_order(self, user_id, checkout_key):
        if not checkout_key:
            return None
        order = current_domain.repository_for(Order).find_by_checkout_key(user_id, checkout_key)
        if order is not None:
            logger.info("checkout_replayed", order_id=str(order.id), user_id=str(user_id))
        return order

    def _cart_product_ids(self, user_id) -> list[str]:
        try:
            cart = current_domain.repository_for(ShoppingCart).get(user_id)
        except ObjectNotFoundError:
            return []
        return cart.product_ids()

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def update_status(self, order_id, requester_id, new_status, admin=False) -> Order:
        if new_status not in ORDER_STATUSES:
            raise InvalidStatus("status", new_status, ORDER_STATUSES)

        with dependency_guard("updating order status"):
            current_domain.process(
                UpdateOrderStatus(
                    order_id=str(order_id),
                    requester_id=str(requester_id) if requester_id else None,
                    status=new_status,
                    admin=admin,
                ),
                asynchronous=False,
            )
            order = current_domain.repository_for(Order).get(order_id)

        logger.info("order_status_updated", order_id=str(order.id), status=order.status, admin=admin)
        self._notify(order, OrderStatusUpdateTemplate.render({"order_id": str(order.id), "status": order.status}))
        return order

    def update_payment_status(self, order_id, new_payment_status) -> Order:
        if new_payment_status not in PAYMENT_STATUSES:
            raise InvalidStatus("payment_status", new_payment_status, PAYMENT_STATUSES)

        with dependency_guard("updating payment status"):
            current_domain.process(
                UpdatePaymentStatus(order_id=str(order_id), payment_status=new_payment_status),
                asynchronous=False,
            )
            order = current_domain.repository_for(Order).get(order_id)

        logger.info("payment_status_updated", order_id=str(order.id), payment_status=order.payment_status)
        return order

    # -------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------
    def _notify(self, order, content):
        try:
            self.sink.record(
                order.customer_id,
                content["title"],
                content["message"],
                notification_type=NotificationType.ORDER.value,
                data=content["data"],
                reference_id=order.id,
            )
        except Exception as exc:
            logger.error(
                "notification_degraded",
                order_id=str(order.id),
                user_id=str(order.customer_id),
                error=str(exc),
            )
