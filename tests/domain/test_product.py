"""Tests for the Product aggregate."""

import pytest
from protean.exceptions import ValidationError

from storefront.catalogue.events import ProductRestocked, StockDecremented
from storefront.catalogue.product import Product
from storefront.errors import InsufficientStock


def _make_product(**overrides):
    defaults = {
        "name": "Mug",
        "description": "Stoneware mug",
        "price": 10.0,
        "stock": 5,
    }
    defaults.update(overrides)
    return Product.add(**defaults)


class TestProductCreation:
    def test_add_sets_fields(self):
        product = _make_product()
        assert product.name == "Mug"
        assert product.stock == 5
        assert product.is_active is True

    def test_stock_defaults_to_zero(self):
        product = Product.add(name="Mug", description="Stoneware mug", price=10.0)
        assert product.stock == 0

    def test_stock_optional_on_direct_construction(self):
        product = Product(name="Mug", description="Stoneware mug", price=10.0)
        assert product.stock == 0

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            Product(name="Mug", description="Stoneware mug", price=10.0, stock=-1)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-1.0)

    def test_discount_must_be_below_price(self):
        with pytest.raises(ValidationError) as exc:
            _make_product(price=10.0, discount_price=10.0)
        assert "discount_price" in exc.value.messages


class TestSellingPrice:
    def test_selling_price_is_price_without_discount(self):
        assert _make_product(price=10.0).selling_price == 10.0

    def test_selling_price_uses_discount(self):
        assert _make_product(price=10.0, discount_price=7.5).selling_price == 7.5


class TestStockDecrement:
    def test_decrement_reduces_stock(self):
        product = _make_product(stock=5)
        product.decrement_stock(2)
        assert product.stock == 3

    def test_decrement_to_exactly_zero(self):
        product = _make_product(stock=3)
        product.decrement_stock(3)
        assert product.stock == 0

    def test_decrement_beyond_stock_raises_with_product_name(self):
        product = _make_product(name="Teapot", stock=1)
        with pytest.raises(InsufficientStock) as exc:
            product.decrement_stock(2)
        assert exc.value.messages == {"stock": ["Insufficient stock for Teapot"]}
        assert product.stock == 1

    def test_decrement_raises_event(self):
        product = _make_product(stock=5)
        product._events.clear()
        product.decrement_stock(2, order_id="order-1")

        event = product._events[-1]
        assert isinstance(event, StockDecremented)
        assert event.previous_stock == 5
        assert event.new_stock == 3
        assert event.order_id == "order-1"

    def test_decrement_requires_positive_quantity(self):
        with pytest.raises(ValidationError):
            _make_product().decrement_stock(0)


class TestRestock:
    def test_restock_adds_units(self):
        product = _make_product(stock=1)
        product._events.clear()
        product.restock(4)
        assert product.stock == 5
        assert isinstance(product._events[-1], ProductRestocked)

    def test_restock_requires_positive_quantity(self):
        with pytest.raises(ValidationError):
            _make_product().restock(0)
