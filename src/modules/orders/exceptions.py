"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API exception handler translates them into HTTP responses.
"""

from __future__ import annotations

from uuid import UUID

from modules.core.exceptions import DomainError, NotFound


class OrderNotFound(NotFound):
    """The requested order does not exist."""

    entity_name = "Order"


class OrderItemNotFound(NotFound):
    """The requested order item does not exist."""

    entity_name = "OrderItem"


class InvalidStatusTransition(DomainError):
    """The order state machine does not allow ``from_status -> to_status``."""

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot transition order from {from_status} to {to_status}")


class DuplicateLineItem(DomainError):
    """The same product code appears more than once in an order request."""

    def __init__(self, product_codes: list) -> None:
        self.product_codes = product_codes
        super().__init__(
            "Duplicate product codes in order items are not allowed: "
            + ", ".join(str(code) for code in product_codes)
        )


class OrderNotModifiable(DomainError):
    """Items of an order in a terminal status can no longer change."""

    def __init__(self, order_code: UUID, status: str) -> None:
        self.order_code = order_code
        self.status = status
        super().__init__(f"Order {order_code} is {status}; its items cannot change")
