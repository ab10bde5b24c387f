"""Storefront bounded context: Catalogue, Cart, Orders and Notifications.

Products, carts and orders share one domain so that checkout can decrement
stock, create the order and empty the cart inside a single Unit of Work.
Notifications are recorded after the checkout commits and pushed to the
customer's device by an event handler.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
