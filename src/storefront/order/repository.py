"""Query methods for the Order aggregate."""

import math

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.errors import NotFoundError
from storefront.order.order import ORDER_STATUSES, Order


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_for_customer(self, order_id, customer_id) -> Order:
        """Load an order, hiding orders that belong to someone else as not found."""
        try:
            order = self.get(order_id)
        except ObjectNotFoundError:
            raise NotFoundError("Order", order_id) from None
        if not order.belongs_to(customer_id):
            raise NotFoundError("Order", order_id)
        return order

    def find_by_checkout_key(self, customer_id, checkout_key) -> Order | None:
        if not checkout_key:
            return None
        return self._dao.query.filter(customer_id=str(customer_id), checkout_key=checkout_key).all().first

    def list_for_customer(self, customer_id, status=None, start_date=None, end_date=None, page=1, limit=10) -> dict:
        """Newest-first page of a customer's orders, with the per-status tally."""
        criteria = {"customer_id": str(customer_id)}
        if status:
            criteria["status"] = status
        if start_date:
            criteria["created_at__gte"] = start_date
        if end_date:
            criteria["created_at__lte"] = end_date

        results = (
            self._dao.query.filter(**criteria).order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
        )
        return {
            "orders": results.items,
            "total": results.total,
            "page": page,
            "pages": page_count(results.total, limit),
            "status_counts": self.status_counts(customer_id),
        }

    def status_counts(self, customer_id) -> dict[str, int]:
        """Number of the customer's orders in each status, zero for absent ones."""
        return {
            status: self._dao.query.filter(customer_id=str(customer_id), status=status).all().total
            for status in ORDER_STATUSES
        }

    def all_orders(self, batch_size=100):
        """Every order, oldest first, read in batches."""
        offset = 0
        while True:
            batch = self._dao.query.order_by("created_at").offset(offset).limit(batch_size).all().items
            yield from batch
            if len(batch) < batch_size:
                return
            offset += batch_size
