"""Read-side helpers for orders and notifications, scoped to one user."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.errors import dependency_guard
from storefront.notification.notification import Notification
from storefront.order.order import Order


def find_order(order_id, user_id) -> Order:
    with dependency_guard("fetching order"):
        return current_domain.repository_for(Order).find_for_customer(order_id, user_id)


def list_orders(user_id, status=None, start_date=None, end_date=None, page=1, limit=10) -> dict:
    with dependency_guard("fetching orders"):
        return current_domain.repository_for(Order).list_for_customer(
            user_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )


def list_notifications(
    user_id,
    unread_only=False,
    notification_type=None,
    start_date=None,
    end_date=None,
    page=1,
    limit=10,
) -> dict:
    with dependency_guard("fetching notifications"):
        return current_domain.repository_for(Notification).list_for_user(
            user_id,
            unread_only=unread_only,
            notification_type=notification_type,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )


def _product_summary(product_id) -> dict | None:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        return None
    return {
        "id": str(product.id),
        "name": product.name,
        "price": product.price,
        "discount_price": product.discount_price,
        "is_active": product.is_active,
    }


def order_view(order: Order) -> dict:
    """Serialise an order with each line's current product attached.

    The line ``price`` stays the frozen checkout price; ``product`` reflects the
    catalogue as it is now, or ``None`` when the product no longer exists.
    """
    with dependency_guard("loading order products"):
        view = order.as_response()
        products = {}
        for item in view["items"]:
            product_id = item["product_id"]
            if product_id not in products:
                products[product_id] = _product_summary(product_id)
            item["product"] = products[product_id]
        return view
