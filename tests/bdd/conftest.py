"""Shared BDD fixtures and step definitions for checkout scenarios."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from factories import ADDRESS, add_product, add_to_cart, register_customer
from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.checkout.workflow import OrderWorkflow
from storefront.notification.notification import Notification


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the order placed or the error raised."""
    return {"order": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_stock(products, name, price, stock):
    products[name] = add_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('customer "{user_id}" is registered'))
def registered_customer(user_id):
    register_customer(user_id)


@given(parsers.cfparse('customer "{user_id}" has {quantity:d} "{name}" in the cart'))
@given(parsers.cfparse('customer "{user_id}" has {quantity:d} more "{name}" in the cart'))
def cart_with_product(products, user_id, quantity, name):
    add_to_cart(user_id, products[name], quantity=quantity)


@given(parsers.cfparse('customer "{user_id}" has placed an order'))
def placed_order(outcome, user_id):
    outcome["order"] = OrderWorkflow().place_order(user_id, ADDRESS, "card")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock == stock


@then(parsers.cfparse('the order is rejected with "{message}"'))
def order_rejected(outcome, message):
    error = outcome["error"]
    assert isinstance(error, ValidationError)
    assert message in str(error.messages)


@then(parsers.cfparse('customer "{user_id}" has {count:d} order notification'))
@then(parsers.cfparse('customer "{user_id}" has {count:d} order notifications'))
def order_notifications(user_id, count):
    result = current_domain.repository_for(Notification).list_for_user(user_id, notification_type="order")
    assert result["total"] == count


@then(parsers.cfparse('the cart of "{user_id}" is empty'))
def cart_empty(user_id):
    assert current_domain.repository_for(ShoppingCart).get(user_id).is_empty


@then(parsers.cfparse('the cart of "{user_id}" still has {count:d} line'))
def cart_lines(user_id, count):
    assert len(current_domain.repository_for(ShoppingCart).get(user_id).items) == count
