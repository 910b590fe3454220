"""Product service layer (catalog administration).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- Product names are unique, case-insensitively, after trimming.
- Updates carry the version the caller last saw (optimistic locking).
- Deletion is physical; order items keep their name/price snapshots.

Stock reservation and restoration do not live here: see
``modules.products.stock.StockAdjuster``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog
from django.db import models, transaction

from modules.core.support import require_by_code, require_version_match
from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing name uniqueness.

        Raises:
            ProductAlreadyExists: the name is already taken.
        """
        log = logger.bind(name=dto.name)

        if self._repo.exists_by_name(dto.name):
            log.warning("product.duplicate_name")
            raise ProductAlreadyExists(dto.name)

        product = Product(
            name=dto.name,
            description=dto.description,
            price=dto.price,
            stock_quantity=dto.stock_quantity,
        )
        product = self._repo.save(product)
        log.info("product.registered", product_code=str(product.code))
        return product

    @transaction.atomic
    def update_product(self, code: UUID, dto: UpdateProductDTO) -> Product:
        """Replace a product's editable fields.

        Raises:
            ProductNotFound: the product does not exist.
            OptimisticLockConflict: ``dto.version`` is stale.
            ProductAlreadyExists: another product already uses the name.
        """
        product = require_by_code(self._repo, ProductNotFound, code)
        require_version_match(product, dto.version)

        log = logger.bind(product_code=str(code))

        if self._repo.exists_by_name(dto.name, exclude_id=product.id):
            log.warning("product.duplicate_name", name=dto.name)
            raise ProductAlreadyExists(dto.name)

        product.name = dto.name
        product.price = dto.price
        product.stock_quantity = dto.stock_quantity
        if dto.description is not None:
            product.description = dto.description

        product = self._repo.save(product)
        log.info("product.updated", version=product.version)
        return product

    @transaction.atomic
    def delete_product(self, code: UUID) -> None:
        """Delete a product; order items referencing it keep their snapshots.

        Raises:
            ProductNotFound: the product does not exist.
        """
        product = require_by_code(self._repo, ProductNotFound, code)
        self._repo.delete(product)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, code: UUID) -> Product:
        """Retrieve a single product by code.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        return require_by_code(self._repo, ProductNotFound, code)

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """Return products, optionally filtered."""
        return self._repo.list(filters)
