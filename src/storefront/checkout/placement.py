"""PlaceOrder: turn a customer's cart into an order.

Everything the handler touches (the order, every product's stock and the
cart) is saved in the handler's single Unit of Work. If any step raises,
nothing is committed.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import EmptyCart, InactiveProduct, InsufficientStock, NotFoundError
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, max_length=50)
    note = Text()
    checkout_key = String(max_length=255)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order_repo = current_domain.repository_for(Order)

        if command.checkout_key:
            existing = order_repo.find_by_checkout_key(command.customer_id, command.checkout_key)
            if existing:
                logger.info(
                    "checkout_replayed",
                    order_id=str(existing.id),
                    user_id=str(command.customer_id),
                )
                return str(existing.id)

        cart_repo = current_domain.repository_for(ShoppingCart)
        try:
            cart = cart_repo.get(command.customer_id)
        except ObjectNotFoundError:
            raise EmptyCart() from None
        if cart.is_empty:
            raise EmptyCart()

        product_repo = current_domain.repository_for(Product)
        products = {}
        for item in cart.items:
            try:
                product = product_repo.get(item.product_id)
            except ObjectNotFoundError:
                raise NotFoundError("Product", item.product_id) from None
            if not product.is_active:
                raise InactiveProduct(product.name)
            if not product.has_stock_for(item.quantity):
                raise InsufficientStock(product.name)
            products[str(item.product_id)] = product

        order = Order.place(
            customer_id=command.customer_id,
            lines=[
                {"product_id": item.product_id, "quantity": item.quantity, "price": item.unit_price}
                for item in cart.items
            ],
            shipping_address=json.loads(command.shipping_address),
            payment_method=command.payment_method,
            note=command.note,
            checkout_key=command.checkout_key,
        )
        order_repo.add(order)

        for item in cart.items:
            product = products[str(item.product_id)]
            product.decrement_stock(item.quantity, order_id=str(order.id))
            product_repo.add(product)

        cart.clear(order_id=str(order.id))
        cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            user_id=str(command.customer_id),
            total_amount=order.total_amount,
            lines=len(order.items),
        )
        return str(order.id)
