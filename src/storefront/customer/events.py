"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class CustomerRegistered:
    """A user became known to the storefront."""

    __version__ = 1

    user_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="Customer")
class DeviceTokenUpdated:
    """The customer's push device token changed."""

    __version__ = 1

    user_id = Identifier(required=True)
    updated_at = DateTime(required=True)
