"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising; the Service Layer decides how to translate a
missing entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_code(self, code: UUID) -> Optional[Product]:
        """Retrieve a product by public code.

        Returns ``None`` for non-existent or malformed codes.
        """
        try:
            return Product.objects.filter(code=code).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: int) -> Optional[Product]:
        return Product.objects.select_for_update().filter(id=id).first()

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"name__icontains": "widget"}
            {"price__lte": Decimal("50.00")}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def exists_by_name(self, name: str, exclude_id: Optional[int] = None) -> bool:
        queryset = Product.objects.filter(name__iexact=name.strip())
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_code=str(entity.code),
            version=entity.version,
            stock_quantity=entity.stock_quantity,
        )
        return entity

    @transaction.atomic
    def delete(self, entity: Product) -> None:
        """Hard-delete a product; referencing order items keep their snapshots."""
        code = entity.code
        entity.delete()
        logger.info("product.deleted", product_code=str(code))
