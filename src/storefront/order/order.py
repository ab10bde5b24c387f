"""Order aggregate: the immutable record of a checked-out cart.

An order is created once, from a non-empty cart, and never loses or gains
lines afterwards. Line prices and the total are frozen at checkout. Only the
fulfilment ``status`` and the ``payment_status`` move after creation, and
either may be set to any of its allowed values.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.config import NOTE_HARD_LIMIT
from storefront.domain import storefront
from storefront.errors import InvalidStatus
from storefront.order.events import OrderPlaced, OrderStatusChanged, PaymentStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


ORDER_STATUSES = [s.value for s in OrderStatus]
PAYMENT_STATUSES = [s.value for s in PaymentStatus]


@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships to, captured at checkout and never updated."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(max_length=100)


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> float:
        return self.quantity * self.price


@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    shipping_address = ValueObject(ShippingAddress)
    note = String(max_length=NOTE_HARD_LIMIT)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(required=True, max_length=50)
    checkout_key = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_lines(self):
        if not self.items:
            return
        expected = sum(item.line_total for item in self.items)
        if abs(expected - (self.total_amount or 0.0)) > 1e-6:
            raise ValidationError({"total_amount": ["Order total must equal the sum of its lines"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, lines, shipping_address, payment_method, note=None, checkout_key=None):
        """Create a pending order from cart lines.

        Args:
            customer_id: The user placing the order.
            lines: List of dicts with product_id, quantity and price.
            shipping_address: Dict with street, city, state, zip_code, country.
            payment_method: Free-form payment method label.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one line"]})

        now = datetime.now(UTC)
        items = [
            OrderItem(product_id=line["product_id"], quantity=line["quantity"], price=line["price"]) for line in lines
        ]
        total_amount = sum(item.line_total for item in items)

        order = cls(
            customer_id=customer_id,
            items=items,
            total_amount=total_amount,
            shipping_address=ShippingAddress(**shipping_address),
            note=note or None,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=payment_method,
            checkout_key=checkout_key,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                items=json.dumps(
                    [
                        {"product_id": str(i.product_id), "quantity": i.quantity, "price": i.price}
                        for i in order.items
                    ]
                ),
                total_amount=total_amount,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    def belongs_to(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def update_status(self, new_status):
        if new_status not in ORDER_STATUSES:
            raise InvalidStatus("status", new_status, ORDER_STATUSES)

        previous = self.status
        now = datetime.now(UTC)
        self.status = new_status
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=previous,
                new_status=new_status,
                changed_at=now,
            )
        )

    def update_payment_status(self, new_payment_status):
        if new_payment_status not in PAYMENT_STATUSES:
            raise InvalidStatus("payment_status", new_payment_status, PAYMENT_STATUSES)

        previous = self.payment_status
        now = datetime.now(UTC)
        self.payment_status = new_payment_status
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_payment_status=previous,
                new_payment_status=new_payment_status,
                changed_at=now,
            )
        )

    def as_response(self) -> dict:
        address = self.shipping_address
        return {
            "id": str(self.id),
            "customer_id": str(self.customer_id),
            "items": [
                {
                    "id": str(item.id),
                    "product_id": str(item.product_id),
                    "quantity": item.quantity,
                    "price": item.price,
                }
                for item in self.items
            ],
            "total_amount": self.total_amount,
            "shipping_address": {
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
                "country": address.country,
            }
            if address
            else None,
            "note": self.note,
            "status": self.status,
            "payment_status": self.payment_status,
            "payment_method": self.payment_method,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
