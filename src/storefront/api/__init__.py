"""Storefront API package."""

from storefront.api.errors import register_exception_handlers
from storefront.api.routes import cart_router, customer_router, notification_router, order_router, product_router

routers = [customer_router, product_router, cart_router, order_router, notification_router]

__all__ = ["routers", "register_exception_handlers"]
