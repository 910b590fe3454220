"""Order service layer (Use Cases).

Orchestrates order and order item lifecycles.  All write operations
are atomic: the service method defines the unit-of-work boundary, and
any exception rolls back every stock reservation, total change and
status change made inside it.

Business rules enforced:
- Stock moves only through ``StockAdjuster`` (row lock per product).
- ``Order.total_amount`` changes only through the Order aggregate helpers.
- Every update carries the version the caller last saw; a mismatch is
  rejected before anything is mutated.
- Status transitions follow ``VALID_TRANSITIONS``.
- Cancelling returns reserved stock and zeroes the total.  Deleting an
  order returns stock too, unless it was already returned by a
  cancellation.
- Items of a COMPLETED or CANCELLED order are frozen.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog
from django.db import models, transaction
from django.utils import timezone

from modules.core.support import require_by_code, require_version_match
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    DuplicateLineItem,
    InvalidStatusTransition,
    OrderItemNotFound,
    OrderNotFound,
    OrderNotModifiable,
)
from modules.orders.models import Order, OrderItem
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.orders.dtos import (
        CreateOrderDTO,
        CreateOrderItemDTO,
        UpdateOrderDTO,
        UpdateOrderItemDTO,
    )
    from modules.orders.repositories.interfaces import (
        IOrderItemRepository,
        IOrderRepository,
    )
    from modules.products.repositories.interfaces import IProductRepository
    from modules.products.stock import StockAdjuster

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and the stock adjuster via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        order_item_repository: IOrderItemRepository,
        product_repository: IProductRepository,
        stock_adjuster: StockAdjuster,
    ) -> None:
        self._order_repo = order_repository
        self._item_repo = order_item_repository
        self._product_repo = product_repository
        self._stock = stock_adjuster

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a PENDING order, reserving stock for every line.

        Steps:
        1. Reject repeated product codes.
        2. For each line: resolve the product, reserve stock, snapshot
           name and price into a new item.
        3. Seed the total from the items and persist order + items.

        Raises:
            DuplicateLineItem: a product code appears on more than one line.
            ProductNotFound: a product code is unknown.
            InsufficientStock: a line asks for more than is available.
        """
        log = logger.bind(customer_email=dto.customer_email)
        log.info("order.creation_started", line_count=len(dto.items))

        counts = Counter(line.product_code for line in dto.items)
        duplicates = [code for code, count in counts.items() if count > 1]
        if duplicates:
            log.warning(
                "order.duplicate_lines",
                product_codes=[str(code) for code in duplicates],
            )
            raise DuplicateLineItem(duplicates)

        order = Order(
            customer_name=dto.customer_name,
            customer_email=dto.customer_email,
            status=OrderStatus.PENDING,
            order_date=timezone.now(),
        )

        items = []
        for line in dto.items:
            product = require_by_code(
                self._product_repo, ProductNotFound, line.product_code
            )
            self._stock.adjust(product.id, line.quantity)
            items.append(OrderItem.snapshot(order, product, line.quantity))

        order.replace_items(items)
        order = self._order_repo.create(order, items)

        log.info(
            "order.created",
            order_code=str(order.code),
            total_amount=str(order.total_amount),
        )
        return order

    @transaction.atomic
    def update_order(self, code: UUID, dto: UpdateOrderDTO) -> Order:
        """Replace customer fields and move the order to ``dto.status``.

        Entering CANCELLED from any other status gives every item's
        quantity back to its product (items whose product was deleted are
        skipped) and zeroes the total; the item rows are kept.

        Raises:
            OrderNotFound: the order does not exist.
            OptimisticLockConflict: ``dto.version`` is stale.
            InvalidStatusTransition: the state machine forbids the move.
        """
        order = self._require_order_with_items(code)
        require_version_match(order, dto.version)

        log = logger.bind(
            order_code=str(order.code),
            current_status=order.status,
            new_status=dto.status,
        )

        if not order.can_transition_to(dto.status):
            log.warning("order.invalid_transition")
            raise InvalidStatusTransition(order.status, dto.status)

        cancelling = (
            dto.status == OrderStatus.CANCELLED
            and order.status != OrderStatus.CANCELLED
        )

        order.customer_name = dto.customer_name
        order.customer_email = dto.customer_email
        order.status = dto.status

        if cancelling:
            self._restore_stock(order)
            order.void_total_amount()
            log.info("order.cancelled")

        order = self._order_repo.save(order)
        log.info("order.updated", version=order.version)
        return order

    @transaction.atomic
    def delete_order(self, code: UUID) -> None:
        """Delete an order and its items, returning their stock.

        An order that is already CANCELLED had its stock returned when it
        was cancelled, so nothing is restored a second time.

        Raises:
            OrderNotFound: the order does not exist.
        """
        order = self._require_order_with_items(code)
        log = logger.bind(order_code=str(order.code), status=order.status)

        if order.status == OrderStatus.CANCELLED:
            log.info("order.restore_skipped", reason="already_cancelled")
        else:
            self._restore_stock(order)

        self._order_repo.delete(order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, code: UUID) -> Order:
        """Retrieve a single order (with items) by code.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        return self._require_order_with_items(code)

    def list_orders(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """Return orders, optionally filtered."""
        return self._order_repo.list(filters)

    def list_order_items(self, order_code: UUID) -> "models.QuerySet[OrderItem]":
        """Return the items of one order.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        require_by_code(self._order_repo, OrderNotFound, order_code)
        return self._item_repo.list_by_order_code(order_code)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_order_with_items(self, code: UUID) -> Order:
        order = self._order_repo.get_with_items(code)
        if order is None:
            raise OrderNotFound(code)
        return order

    def _restore_stock(self, order: Order) -> None:
        for item in order.line_items:
            if item.product_id is not None:
                self._stock.adjust(item.product_id, -item.quantity)


class OrderItemService:
    """Application service for adding, resizing and removing order lines.

    Every change to an item is followed by recalculating and saving the
    parent order's total inside the same transaction.
    """

    def __init__(
        self,
        order_item_repository: IOrderItemRepository,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        stock_adjuster: StockAdjuster,
    ) -> None:
        self._item_repo = order_item_repository
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._stock = stock_adjuster

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_item(self, dto: CreateOrderItemDTO) -> OrderItem:
        """Add a line to an existing order, reserving its stock.

        Raises:
            OrderNotFound: the order does not exist.
            ProductNotFound: the product does not exist.
            OrderNotModifiable: the order is COMPLETED or CANCELLED.
            InsufficientStock: not enough stock for ``dto.quantity``.
        """
        order = require_by_code(self._order_repo, OrderNotFound, dto.order_code)
        self._require_modifiable(order)
        product = require_by_code(
            self._product_repo, ProductNotFound, dto.product_code
        )

        self._stock.adjust(product.id, dto.quantity)

        item = OrderItem.snapshot(order, product, dto.quantity)
        item = self._item_repo.save(item)
        order.add_item(item)
        self._order_repo.save(order)

        logger.info(
            "order_item.created",
            order_code=str(order.code),
            order_item_code=str(item.code),
            quantity=item.quantity,
            total_amount=str(order.total_amount),
        )
        return item

    @transaction.atomic
    def update_item(self, code: UUID, dto: UpdateOrderItemDTO) -> OrderItem:
        """Change an item's quantity, reserving or restoring the difference.

        When the item's product has been deleted the stock side is
        skipped; the quantity and the order total still change.

        Raises:
            OrderItemNotFound: the item does not exist.
            OptimisticLockConflict: ``dto.version`` is stale.
            OrderNotModifiable: the order is COMPLETED or CANCELLED.
            InsufficientStock: the increase exceeds available stock.
        """
        item = require_by_code(self._item_repo, OrderItemNotFound, code)
        require_version_match(item, dto.version)
        order = item.order
        self._require_modifiable(order)

        delta = item.quantity_delta_to(dto.quantity)
        if item.product_id is not None:
            self._stock.adjust(item.product_id, delta)

        item.quantity = dto.quantity
        item = self._item_repo.save(item)

        order.replace_item(item)
        self._order_repo.save(order)

        logger.info(
            "order_item.updated",
            order_item_code=str(item.code),
            delta=delta,
            version=item.version,
            total_amount=str(order.total_amount),
        )
        return item

    @transaction.atomic
    def delete_item(self, code: UUID) -> None:
        """Remove an item from its order, returning its stock.

        Raises:
            OrderItemNotFound: the item does not exist.
            OrderNotModifiable: the order is COMPLETED or CANCELLED.
        """
        item = require_by_code(self._item_repo, OrderItemNotFound, code)
        order = item.order
        self._require_modifiable(order)

        if item.product_id is not None:
            self._stock.adjust(item.product_id, -item.quantity)

        order.remove_item(item)
        self._order_repo.save(order)
        self._item_repo.delete(item)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_item(self, code: UUID) -> OrderItem:
        """Raises ``OrderItemNotFound`` if the item does not exist."""
        return require_by_code(self._item_repo, OrderItemNotFound, code)

    def list_items(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[OrderItem]":
        return self._item_repo.list(filters)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_modifiable(self, order: Order) -> None:
        if order.is_terminal:
            logger.warning(
                "order_item.rejected",
                order_code=str(order.code),
                status=order.status,
            )
            raise OrderNotModifiable(order.code, order.status)
