"""Error taxonomy for the storefront.

- ``ValidationError`` (Protean): malformed or missing input.
- ``NotFoundError``: the entity is absent or does not belong to the requester.
- ``BusinessRuleError``: a well-formed request that breaks a rule (empty cart,
  insufficient stock, unknown status value).
- ``DependencyError``: a store or provider failed underneath us.

The API layer maps them to 400, 404, 400 and 500 respectively.
"""

from contextlib import contextmanager

from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class BusinessRuleError(ValidationError):
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__({field: [message]})


class EmptyCart(BusinessRuleError):
    def __init__(self):
        super().__init__("cart", "Cart is empty")


class InsufficientStock(BusinessRuleError):
    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__("stock", f"Insufficient stock for {product_name}")


class InactiveProduct(BusinessRuleError):
    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__("product", f"{product_name} is no longer available")


class InvalidStatus(BusinessRuleError):
    def __init__(self, field: str, value, allowed):
        self.value = value
        self.allowed = list(allowed)
        super().__init__(field, f"Invalid {field} '{value}'. Must be one of: {', '.join(self.allowed)}")


class NotFoundError(ObjectNotFoundError):
    def __init__(self, entity: str, identifier=None):
        self.entity = entity
        self.identifier = identifier
        self.message = f"{entity} not found"
        super().__init__(self.message)


class DependencyError(Exception):
    """A persistence or provider call failed while the request was being served."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def first_message(messages) -> str:
    """Flatten Protean's ``{"field": ["msg", ...]}`` error payload into one line."""
    if isinstance(messages, dict):
        for field, errors in messages.items():
            if isinstance(errors, list | tuple) and errors:
                return str(errors[0])
            if errors:
                return str(errors)
            return f"Invalid {field}"
        return "Invalid request"
    return str(messages)


@contextmanager
def dependency_guard(action: str):
    """Let domain errors through; turn anything else into a DependencyError."""
    try:
        yield
    except (ValidationError, ObjectNotFoundError):
        raise
    except Exception as exc:
        logger.exception("dependency_failure", action=action, error=str(exc))
        raise DependencyError(f"Error {action}") from exc
