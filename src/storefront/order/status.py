"""Order status and payment status updates."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import NotFoundError
from storefront.order.order import Order


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    requester_id = Identifier()
    status = String(required=True, max_length=20)
    admin = Boolean(default=False)


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        if command.admin:
            try:
                order = repo.get(command.order_id)
            except ObjectNotFoundError:
                raise NotFoundError("Order", command.order_id) from None
        else:
            order = repo.find_for_customer(command.order_id, command.requester_id)

        order.update_status(command.status)
        repo.add(order)

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            raise NotFoundError("Order", command.order_id) from None

        order.update_payment_status(command.payment_status)
        repo.add(order)
