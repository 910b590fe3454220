"""Order repository interfaces.

``IOrderRepository`` extends ``IRepository[Order]`` with what the Order
aggregate needs: atomic creation with items and an eager load of the
items collection.  ``IOrderItemRepository`` covers line items addressed
on their own.

The Service Layer depends exclusively on these contracts (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children; creating or
    deleting it must be atomic.
    """

    @abstractmethod
    def create(self, order: Order, items: List[OrderItem]) -> Order:
        """Insert a new order together with its items."""

    @abstractmethod
    def get_with_items(self, code: UUID) -> Optional[Order]:
        """Retrieve an order with its items (and their products) eager-loaded."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """List orders with optional filters."""


class IOrderItemRepository(IRepository["OrderItem"]):
    """Repository contract for order items."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[OrderItem]":
        """List order items with optional filters."""

    @abstractmethod
    def list_by_order_code(self, order_code: UUID) -> "models.QuerySet[OrderItem]":
        """List the items belonging to one order."""
