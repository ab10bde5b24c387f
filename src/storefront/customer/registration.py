"""Customer registration and device-token management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.errors import NotFoundError


@storefront.command(part_of="Customer")
class RegisterCustomer:
    user_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)


@storefront.command(part_of="Customer")
class UpdateDeviceToken:
    user_id = Identifier(required=True)
    fcm_token = String(required=True, max_length=4096)


@storefront.command_handler(part_of=Customer)
class CustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        repo = current_domain.repository_for(Customer)
        try:
            repo.get(command.user_id)
        except ObjectNotFoundError:
            pass
        else:
            raise ValidationError({"user_id": ["User already exists"]})

        customer = Customer.register(
            user_id=command.user_id,
            name=command.name,
            email=command.email,
        )
        repo.add(customer)
        return str(customer.user_id)

    @handle(UpdateDeviceToken)
    def update_device_token(self, command):
        repo = current_domain.repository_for(Customer)
        try:
            customer = repo.get(command.user_id)
        except ObjectNotFoundError:
            raise NotFoundError("User", command.user_id) from None

        customer.update_device_token(command.fcm_token)
        repo.add(customer)
