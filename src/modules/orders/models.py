"""Order and OrderItem models.

Business rules implemented:
- ``Order`` is the aggregate root and the only entry point for changing
  which items belong to it: ``replace_items``, ``add_item``,
  ``replace_item`` and ``remove_item`` all finish by recalculating
  ``total_amount``, so ``total_amount == sum(unit_price * quantity)``
  holds after every structural change.
- Status only moves forward through ``VALID_TRANSITIONS``; staying in the
  same status is always allowed.
- ``OrderItem`` snapshots the product name and price at creation time;
  the snapshot is never recomputed from the live product.
- ``OrderItem.product`` is a weak reference: deleting the product sets it
  to ``NULL`` and the snapshot survives.
- Deleting an order cascades to its items.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.functional import cached_property

from modules.core.models import VersionedModel
from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus

if TYPE_CHECKING:
    from modules.products.models import Product

ZERO = Decimal("0.00")


class Order(VersionedModel):
    """Order aggregate root.

    ``line_items`` is the in-memory view of the items collection.  It is
    loaded lazily from ``items`` (honouring ``prefetch_related``) and must
    only be changed through the aggregate helpers below.
    """

    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField()
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total_amount = models.DecimalField(
        max_digits=19,
        decimal_places=2,
        default=ZERO,
    )
    order_date = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "orders"
        ordering = ["-order_date", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-order_date"], name="orders_order_date_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether moving from the current status to *new_status* is valid."""
        if new_status == self.status:
            return True
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    # ------------------------------------------------------------------
    # Aggregate helpers
    # ------------------------------------------------------------------

    @cached_property
    def line_items(self) -> list[OrderItem]:
        if self._state.adding:
            return []
        return list(self.items.all())

    def replace_items(self, items: Iterable[OrderItem]) -> list[OrderItem]:
        """Make *items* the whole collection (used when the order is built)."""
        attached = [self._attach(item) for item in items]
        self.__dict__["line_items"] = attached
        self.recalculate_total_amount()
        return attached

    def add_item(self, item: OrderItem) -> None:
        self._attach(item)
        self.line_items[:] = [i for i in self.line_items if not _same_item(i, item)]
        self.line_items.append(item)
        self.recalculate_total_amount()

    def replace_item(self, item: OrderItem) -> None:
        """Swap in an updated instance of an item already in the collection."""
        self._attach(item)
        self.line_items[:] = [
            item if _same_item(i, item) else i for i in self.line_items
        ]
        self.recalculate_total_amount()

    def remove_item(self, item: OrderItem) -> None:
        self.line_items[:] = [i for i in self.line_items if not _same_item(i, item)]
        self.recalculate_total_amount()

    def recalculate_total_amount(self) -> Decimal:
        self.total_amount = sum((i.line_total for i in self.line_items), ZERO)
        return self.total_amount

    def void_total_amount(self) -> None:
        """Zero the total of a cancelled order; item rows are kept for history."""
        self.total_amount = ZERO

    def _attach(self, item: OrderItem) -> OrderItem:
        item.order = self
        return item

    def __str__(self) -> str:
        return f"Order {self.code} ({self.status})"


class OrderItem(VersionedModel):
    """Line item linking an Order to a Product.

    ``product_name`` and ``unit_price`` are copied from the product when
    the item is created and never change afterwards, even if the product
    is edited or deleted.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    product_name = models.CharField(max_length=255)
    unit_price = models.DecimalField(max_digits=19, decimal_places=2)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @classmethod
    def snapshot(cls, order: Order, product: Product, quantity: int) -> OrderItem:
        """Build an item capturing *product*'s current name and price."""
        return cls(
            order=order,
            product=product,
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
        )

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def quantity_delta_to(self, new_quantity: int) -> int:
        return new_quantity - self.quantity

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} (${self.line_total})"


def _same_item(a: OrderItem, b: OrderItem) -> bool:
    return a is b or (a.pk is not None and a.pk == b.pk)
