"""BDD tests for checkout."""

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when

from factories import ADDRESS
from storefront.checkout.workflow import OrderWorkflow

scenarios("features/checkout.feature")


@when(parsers.cfparse('customer "{user_id}" places an order'))
def place_order(outcome, user_id):
    try:
        outcome["order"] = OrderWorkflow().place_order(user_id, ADDRESS, "card")
        outcome["error"] = None
    except ValidationError as exc:
        outcome["error"] = exc


@when(parsers.cfparse('customer "{user_id}" marks the order "{status}"'))
def mark_order(outcome, user_id, status):
    outcome["order"] = OrderWorkflow().update_status(outcome["order"].id, user_id, status)


@then(parsers.cfparse("the order total is {total:f}"))
def order_total(outcome, total):
    assert outcome["error"] is None
    assert outcome["order"].total_amount == total


@then("the order is pending with payment pending")
def order_pending(outcome):
    assert outcome["order"].status == "pending"
    assert outcome["order"].payment_status == "pending"


@then(parsers.cfparse('the order status is "{status}"'))
def order_status(outcome, status):
    assert outcome["order"].status == status
