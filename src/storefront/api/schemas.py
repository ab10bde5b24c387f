"""Pydantic request/response schemas for the Storefront API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Customer ---


class RegisterCustomerRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254)


class DeviceTokenRequest(BaseModel):
    fcm_token: str = Field(..., min_length=1)


class CustomerIdResponse(BaseModel):
    customer_id: str


# --- Product ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Classic Black T-Shirt",
                    "description": "Premium cotton crew-neck tee in black.",
                    "price": 25.0,
                    "discount_price": 19.99,
                    "stock": 40,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    discount_price: float | None = Field(None, ge=0)
    stock: int = Field(0, ge=0)
    is_active: bool = True


class RestockRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    price: float
    discount_price: float | None = None
    selling_price: float
    stock: int
    is_active: bool


# --- Cart ---


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    unit_price: float
    line_total: float


class CartResponse(BaseModel):
    customer_id: str
    items: list[CartItemResponse] = []
    total_amount: float = 0.0


# --- Order ---


class ShippingAddressRequest(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: str | None = None


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": {
                        "street": "12 Market Street",
                        "city": "Springfield",
                        "state": "IL",
                        "zip_code": "62701",
                        "country": "US",
                    },
                    "payment_method": "card",
                    "note": "Leave at the door",
                }
            ]
        }
    }

    shipping_address: ShippingAddressRequest
    payment_method: str
    note: str | None = None
    checkout_key: str | None = Field(None, max_length=255)


class UpdateOrderStatusRequest(BaseModel):
    status: str


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: str


class OrderProductResponse(BaseModel):
    id: str
    name: str
    price: float
    discount_price: float | None = None
    is_active: bool


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product: OrderProductResponse | None = None
    quantity: int
    price: float


class ShippingAddressResponse(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: str | None = None


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    items: list[OrderItemResponse]
    total_amount: float
    shipping_address: ShippingAddressResponse | None = None
    note: str | None = None
    status: str
    payment_status: str
    payment_method: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    pages: int
    status_counts: dict[str, int]


# --- Notification ---


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    notification_type: str
    is_read: bool
    data: dict = {}
    reference_id: str | None = None
    push_status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    page: int
    pages: int
    unread_count: int


class MessageResponse(BaseModel):
    message: str


class StatusResponse(BaseModel):
    status: str = "ok"
