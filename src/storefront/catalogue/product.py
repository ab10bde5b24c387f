"""Product aggregate: the catalogue record the checkout reads prices and stock from.

Catalogue administration is thin here: products are added and restocked.
The only mutation the order workflow performs is ``decrement_stock``, which
re-checks availability before touching the count.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.catalogue.events import ProductAdded, ProductRestocked, StockDecremented
from storefront.domain import storefront
from storefront.errors import InsufficientStock


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    discount_price = Float(min_value=0.0)
    stock = Integer(min_value=0, default=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discount_must_be_below_price(self):
        if self.discount_price is not None and self.price is not None and self.discount_price >= self.price:
            raise ValidationError({"discount_price": ["Discount price must be less than regular price"]})

    @classmethod
    def add(cls, name, description, price, stock=0, discount_price=None, is_active=True):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=price,
            discount_price=discount_price,
            stock=stock,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                price=price,
                discount_price=discount_price,
                stock=stock,
                added_at=now,
            )
        )
        return product

    @property
    def selling_price(self) -> float:
        """Price a customer pays today: the discount price when one is set."""
        if self.discount_price is not None:
            return self.discount_price
        return self.price

    def has_stock_for(self, quantity: int) -> bool:
        return self.stock >= quantity

    def decrement_stock(self, quantity, order_id=None):
        """Take ``quantity`` units out of stock, refusing to go below zero."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.has_stock_for(quantity):
            raise InsufficientStock(self.name)

        previous = self.stock
        now = datetime.now(UTC)
        self.stock = previous - quantity
        self.updated_at = now

        self.raise_(
            StockDecremented(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                order_id=order_id,
                decremented_at=now,
            )
        )

    def restock(self, quantity):
        if quantity < 1:
            raise ValidationError({"quantity": ["Restock quantity must be at least 1"]})

        now = datetime.now(UTC)
        self.stock = self.stock + quantity
        self.updated_at = now

        self.raise_(
            ProductRestocked(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
                restocked_at=now,
            )
        )
