"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by the
case-insensitive name rule and by ``StockAdjuster``'s locked reads.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional filters."""

    @abstractmethod
    def exists_by_name(self, name: str, exclude_id: Optional[int] = None) -> bool:
        """Check for a product named *name* (case-insensitive).

        *exclude_id* leaves one row out of the check (the product being
        updated).
        """

    @abstractmethod
    def get_for_update(self, id: int) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Used by ``StockAdjuster`` for atomic stock reservation/restoration.
        The lock is held until the surrounding transaction ends.
        Returns ``None`` if the product does not exist.
        """
