"""Customer aggregate: the storefront's view of an authenticated user.

Authentication lives elsewhere; the storefront only needs a name, an email
and the device token push notifications are delivered to.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, String

from storefront.customer.events import CustomerRegistered, DeviceTokenUpdated
from storefront.domain import storefront


@storefront.aggregate
class Customer:
    user_id = Identifier(identifier=True, required=True)
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    fcm_token = String(max_length=4096)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, user_id, name, email):
        now = datetime.now(UTC)
        customer = cls(
            user_id=user_id,
            name=name,
            email=email.strip().lower(),
            created_at=now,
            updated_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                user_id=str(user_id),
                name=name,
                email=customer.email,
                registered_at=now,
            )
        )
        return customer

    def update_device_token(self, fcm_token):
        if not fcm_token or not fcm_token.strip():
            raise ValidationError({"fcm_token": ["FCM token is required"]})

        now = datetime.now(UTC)
        self.fcm_token = fcm_token.strip()
        self.updated_at = now

        self.raise_(DeviceTokenUpdated(user_id=str(self.user_id), updated_at=now))


@storefront.repository(part_of=Customer)
class CustomerRepository:
    def device_token_for(self, user_id) -> str | None:
        """The push token registered for ``user_id``, or None for unknown users."""
        try:
            customer = self.get(user_id)
        except ObjectNotFoundError:
            return None
        return customer.fcm_token or None
