"""FastAPI endpoints for the Storefront.

Thin adapters: every route reads the requester from ``X-User-Id``, turns the
request into a command or workflow call and serialises the result.
"""

from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_user_id, get_workflow
from storefront.api.schemas import (
    AddToCartRequest,
    CartResponse,
    CreateProductRequest,
    CustomerIdResponse,
    DeviceTokenRequest,
    MessageResponse,
    NotificationListResponse,
    NotificationResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductResponse,
    RegisterCustomerRequest,
    RestockRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
)
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.catalogue.management import AddProduct, RestockProduct
from storefront.catalogue.product import Product
from storefront.checkout.locks import checkout_locks
from storefront.checkout.workflow import OrderWorkflow
from storefront.customer.registration import RegisterCustomer, UpdateDeviceToken
from storefront.errors import NotFoundError
from storefront.notification.management import DeleteNotification, MarkAllNotificationsRead, MarkNotificationRead
from storefront.notification.notification import Notification
from storefront.queries import find_order, list_notifications, list_orders, order_view

customer_router = APIRouter(prefix="/customers", tags=["customers"])
product_router = APIRouter(prefix="/products", tags=["products"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


def _parse_date(value: str | None, field: str, end_of_day: bool = False) -> datetime | None:
    """Parse an ISO date or datetime query value as UTC.

    A bare date used as an upper bound covers that whole day.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError({field: [f"Invalid date '{value}'"]}) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    if end_of_day and len(value) == 10:
        parsed = parsed + timedelta(days=1) - timedelta(microseconds=1)
    return parsed


def _page_params(page: int, limit: int) -> tuple[int, int]:
    if page < 1:
        raise ValidationError({"page": ["Page must be at least 1"]})
    if not 1 <= limit <= 100:
        raise ValidationError({"limit": ["Limit must be between 1 and 100"]})
    return page, limit


def _cart_response(user_id: str) -> CartResponse:
    try:
        cart = current_domain.repository_for(ShoppingCart).get(user_id)
    except ObjectNotFoundError:
        return CartResponse(customer_id=user_id)
    return CartResponse(
        customer_id=str(cart.customer_id),
        items=[
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "line_total": item.line_total,
            }
            for item in cart.items
        ],
        total_amount=cart.total_amount,
    )


# --- Customers ---


@customer_router.post("", status_code=201, response_model=CustomerIdResponse)
async def register_customer(
    body: RegisterCustomerRequest, user_id: str = Depends(current_user_id)
) -> CustomerIdResponse:
    command = RegisterCustomer(user_id=user_id, name=body.name, email=body.email)
    result = current_domain.process(command, asynchronous=False)
    return CustomerIdResponse(customer_id=result)


@customer_router.post("/me/fcm-token", response_model=MessageResponse)
async def update_device_token(body: DeviceTokenRequest, user_id: str = Depends(current_user_id)) -> MessageResponse:
    current_domain.process(UpdateDeviceToken(user_id=user_id, fcm_token=body.fcm_token), asynchronous=False)
    return MessageResponse(message="FCM token updated successfully")


# --- Products ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: CreateProductRequest, user_id: str = Depends(current_user_id)) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        discount_price=body.discount_price,
        stock=body.stock,
        is_active=body.is_active,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFoundError("Product", product_id) from None
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        discount_price=product.discount_price,
        selling_price=product.selling_price,
        stock=product.stock,
        is_active=product.is_active,
    )


@product_router.put("/{product_id}/restock", response_model=StatusResponse)
async def restock_product(
    product_id: str, body: RestockRequest, user_id: str = Depends(current_user_id)
) -> StatusResponse:
    with checkout_locks.products([product_id]):
        current_domain.process(RestockProduct(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return StatusResponse()


# --- Cart ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    return _cart_response(user_id)


@cart_router.post("/items", status_code=201, response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, user_id: str = Depends(current_user_id)) -> CartResponse:
    with checkout_locks.user(user_id):
        current_domain.process(
            AddToCart(customer_id=user_id, product_id=body.product_id, quantity=body.quantity),
            asynchronous=False,
        )
    return _cart_response(user_id)


@cart_router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str, body: UpdateCartItemRequest, user_id: str = Depends(current_user_id)
) -> CartResponse:
    with checkout_locks.user(user_id):
        current_domain.process(
            UpdateCartQuantity(customer_id=user_id, item_id=item_id, quantity=body.quantity),
            asynchronous=False,
        )
    return _cart_response(user_id)


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, user_id: str = Depends(current_user_id)) -> CartResponse:
    with checkout_locks.user(user_id):
        current_domain.process(RemoveFromCart(customer_id=user_id, item_id=item_id), asynchronous=False)
    return _cart_response(user_id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    with checkout_locks.user(user_id):
        current_domain.process(ClearCart(customer_id=user_id), asynchronous=False)
    return _cart_response(user_id)


# --- Orders ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    body: PlaceOrderRequest,
    user_id: str = Depends(current_user_id),
    workflow: OrderWorkflow = Depends(get_workflow),
) -> OrderResponse:
    order = workflow.place_order(
        user_id,
        shipping_address=body.shipping_address.model_dump(),
        payment_method=body.payment_method,
        note=body.note,
        checkout_key=body.checkout_key,
    )
    return OrderResponse(**order_view(order))


@order_router.get("", response_model=OrderListResponse)
async def get_orders(
    page: int = 1,
    limit: int = 10,
    status: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    user_id: str = Depends(current_user_id),
) -> OrderListResponse:
    page, limit = _page_params(page, limit)
    result = list_orders(
        user_id,
        status=status,
        start_date=_parse_date(start_date, "start_date"),
        end_date=_parse_date(end_date, "end_date", end_of_day=True),
        page=page,
        limit=limit,
    )
    return OrderListResponse(
        orders=[OrderResponse(**order_view(order)) for order in result["orders"]],
        total=result["total"],
        page=result["page"],
        pages=result["pages"],
        status_counts=result["status_counts"],
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    return OrderResponse(**order_view(find_order(order_id, user_id)))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    user_id: str = Depends(current_user_id),
    workflow: OrderWorkflow = Depends(get_workflow),
) -> OrderResponse:
    order = workflow.update_status(order_id, user_id, body.status)
    return OrderResponse(**order_view(order))


@order_router.put("/{order_id}/payment", response_model=OrderResponse)
async def update_payment_status(
    order_id: str,
    body: UpdatePaymentStatusRequest,
    user_id: str = Depends(current_user_id),
    workflow: OrderWorkflow = Depends(get_workflow),
) -> OrderResponse:
    order = workflow.update_payment_status(order_id, body.payment_status)
    return OrderResponse(**order_view(order))


# --- Notifications ---


@notification_router.get("", response_model=NotificationListResponse)
async def get_notifications(
    page: int = 1,
    limit: int = 10,
    unread_only: bool = False,
    notification_type: str | None = Query(None, alias="type"),
    start_date: str | None = None,
    end_date: str | None = None,
    user_id: str = Depends(current_user_id),
) -> NotificationListResponse:
    page, limit = _page_params(page, limit)
    result = list_notifications(
        user_id,
        unread_only=unread_only,
        notification_type=notification_type,
        start_date=_parse_date(start_date, "start_date"),
        end_date=_parse_date(end_date, "end_date", end_of_day=True),
        page=page,
        limit=limit,
    )
    return NotificationListResponse(
        notifications=[NotificationResponse(**n.as_response()) for n in result["notifications"]],
        total=result["total"],
        page=result["page"],
        pages=result["pages"],
        unread_count=result["unread_count"],
    )


@notification_router.put("/read-all", response_model=MessageResponse)
async def mark_all_read(user_id: str = Depends(current_user_id)) -> MessageResponse:
    flipped = current_domain.process(MarkAllNotificationsRead(user_id=user_id), asynchronous=False)
    return MessageResponse(message=f"{flipped} notifications marked as read")


@notification_router.put("/{notification_id}", response_model=NotificationResponse)
async def mark_read(notification_id: str, user_id: str = Depends(current_user_id)) -> NotificationResponse:
    current_domain.process(MarkNotificationRead(notification_id=notification_id, user_id=user_id), asynchronous=False)
    notification = current_domain.repository_for(Notification).get(notification_id)
    return NotificationResponse(**notification.as_response())


@notification_router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(notification_id: str, user_id: str = Depends(current_user_id)) -> MessageResponse:
    current_domain.process(DeleteNotification(notification_id=notification_id, user_id=user_id), asynchronous=False)
    return MessageResponse(message="Notification deleted")
