"""Django ORM implementations of the Order and OrderItem repositories.

Writes are wrapped in ``transaction.atomic()`` so the Order aggregate
(Order + OrderItems) is persisted atomically; when called from a service
they join the service's transaction.

Django issues the UPDATE as soon as ``save()`` is called, so a saved
entity already carries its bumped ``version`` when control returns to
the caller.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import (
    IOrderItemRepository,
    IOrderRepository,
)

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, order: Order, items: List[OrderItem]) -> Order:
        """Insert *order*, then each of *items* pointing at it.

        ``order.total_amount`` must already reflect *items* (see
        ``Order.replace_items``) so the order row is written once and
        starts at version 0.
        """
        order.save()
        for item in items:
            item.order = order
            item.save()

        logger.info(
            "order.persisted",
            order_code=str(order.code),
            item_count=len(items),
            total_amount=str(order.total_amount),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_code(self, code: UUID) -> Optional[Order]:
        """Retrieve an order by code; ``None`` for unknown or malformed codes."""
        try:
            return Order.objects.filter(code=code).first()
        except (ValueError, ValidationError):
            return None

    def get_with_items(self, code: UUID) -> Optional[Order]:
        """Retrieve an order with ``items__product`` prefetched (no N+1)."""
        try:
            return (
                Order.objects.prefetch_related("items__product")
                .filter(code=code)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """List orders with optional filters and eager-loaded items.

        Examples of valid filters::

            {"status": "PENDING"}
            {"customer_email__iexact": "jane@example.com"}
        """
        queryset = Order.objects.prefetch_related("items__product")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Save / Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order's own columns (status, customer, total)."""
        entity.save()
        logger.info(
            "order.saved",
            order_code=str(entity.code),
            version=entity.version,
            total_amount=str(entity.total_amount),
        )
        return entity

    @transaction.atomic
    def delete(self, entity: Order) -> None:
        """Delete an order; its items go with it (CASCADE)."""
        code = entity.code
        entity.delete()
        logger.info("order.deleted", order_code=str(code))


class OrderItemDjangoRepository(IOrderItemRepository):
    """Concrete OrderItem repository backed by Django ORM."""

    def get_by_code(self, code: UUID) -> Optional[OrderItem]:
        """Retrieve an item with its order and product joined."""
        try:
            return (
                OrderItem.objects.select_related("order", "product")
                .filter(code=code)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[OrderItem]":
        queryset = OrderItem.objects.select_related("order", "product")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_by_order_code(self, order_code: UUID) -> "models.QuerySet[OrderItem]":
        return self.list({"order__code": order_code})

    @transaction.atomic
    def save(self, entity: OrderItem) -> OrderItem:
        entity.save()
        logger.info(
            "order_item.saved",
            order_item_code=str(entity.code),
            version=entity.version,
            quantity=entity.quantity,
        )
        return entity

    @transaction.atomic
    def delete(self, entity: OrderItem) -> None:
        code = entity.code
        entity.delete()
        logger.info("order_item.deleted", order_item_code=str(code))
