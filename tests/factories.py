"""Builders shared by the storefront tests."""

from protean import current_domain

from storefront.cart.items import AddToCart
from storefront.catalogue.management import AddProduct
from storefront.customer.registration import RegisterCustomer, UpdateDeviceToken

ADDRESS = {
    "street": "12 Market Street",
    "city": "Springfield",
    "state": "IL",
    "zip_code": "62701",
    "country": "US",
}


def add_product(name="Mug", price=10.0, stock=5, **kwargs):
    return current_domain.process(
        AddProduct(name=name, description=f"{name} description", price=price, stock=stock, **kwargs),
        asynchronous=False,
    )


def register_customer(user_id="user-1", device_token=None):
    current_domain.process(
        RegisterCustomer(user_id=user_id, name="Ada Lovelace", email=f"{user_id}@example.com"),
        asynchronous=False,
    )
    if device_token:
        current_domain.process(UpdateDeviceToken(user_id=user_id, fcm_token=device_token), asynchronous=False)
    return user_id


def add_to_cart(user_id, product_id, quantity=1):
    return current_domain.process(
        AddToCart(customer_id=user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )
