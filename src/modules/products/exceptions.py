"""Product domain exceptions.

Raised by the Service Layer (and by ``Product.decrease_stock``) when
business rules are violated.  The API exception handler translates
them into HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import DomainError, DuplicateResource, NotFound


class ProductNotFound(NotFound):
    """The requested product does not exist (or was deleted)."""

    entity_name = "Product"


class ProductAlreadyExists(DuplicateResource):
    """A product with the same name (case-insensitive) already exists."""

    def __init__(self, name: str) -> None:
        super().__init__("Product", "name", name)


class InsufficientStock(DomainError):
    """Not enough stock to reserve the requested quantity."""

    def __init__(self, product_name: str, available: int, requested: int) -> None:
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product '{product_name}': "
            f"available={available}, requested={requested}"
        )
