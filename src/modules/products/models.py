"""Product model with case-insensitive name uniqueness and stock control.

Business rules implemented:
- Name must be unique, compared case-insensitively (functional unique
  constraint on ``Lower(name)``; the service layer checks first so callers
  get a ``ProductAlreadyExists`` instead of an ``IntegrityError``).
- Price must be greater than zero.
- Stock quantity can never go negative: ``decrease_stock`` refuses and
  leaves the counter untouched.
- Products are hard-deleted; order items keep their name/price snapshot
  and lose only the back-reference (``SET_NULL`` on ``OrderItem.product``).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models.functions import Lower

from modules.core.models import VersionedModel
from modules.products.exceptions import InsufficientStock

logger = structlog.get_logger(__name__)


class Product(VersionedModel):
    """Catalog entry owning a mutable stock counter.

    ``stock_quantity`` is only changed by ``StockAdjuster`` (reservation and
    restoration under a row lock) or by a direct catalog edit.
    """

    name = models.CharField(max_length=255)
    description = models.CharField(max_length=2000, blank=True, default="")
    price = models.DecimalField(
        max_digits=19,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    stock_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                Lower("name"),
                name="products_name_ci_unique",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    def decrease_stock(self, quantity: int) -> None:
        """Take *quantity* units out of stock.

        Raises:
            InsufficientStock: fewer than *quantity* units are available.
        """
        _require_positive(quantity)
        available = self.stock_quantity or 0
        if available - quantity < 0:
            raise InsufficientStock(self.name, available, quantity)
        self.stock_quantity = available - quantity

    def increase_stock(self, quantity: int) -> None:
        """Put *quantity* units back into stock."""
        _require_positive(quantity)
        self.stock_quantity = (self.stock_quantity or 0) + quantity

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.name:
            self.name = self.name.strip()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product.created",
                product_code=str(self.code),
                name=self.name,
                stock_quantity=self.stock_quantity,
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.stock_quantity} in stock)"


def _require_positive(quantity: int) -> None:
    if quantity <= 0:
        raise ValueError("Quantity must be greater than zero.")
