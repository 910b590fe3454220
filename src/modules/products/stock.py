"""Stock adjustment: the only code path that moves ``stock_quantity``.

``adjust(product_id, delta)`` interprets the sign of *delta*:

- ``delta > 0``: reserve, i.e. take ``delta`` units out of stock.
- ``delta < 0``: restore, i.e. give ``|delta|`` units back.
- ``delta == 0`` or ``product_id is None``: nothing to do.

Both directions read the product with ``SELECT ... FOR UPDATE`` so two
transactions adjusting the same product are serialized: the second one
blocks until the first commits or rolls back and then sees its result.
The lock lives as long as the caller's transaction, which is also the
transaction the new stock value is written in.

Restoring stock for a product that has been deleted is logged and
absorbed: there is no row left to credit.  Reserving against a deleted
product raises ``ProductNotFound``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import InsufficientStock, ProductNotFound

if TYPE_CHECKING:
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class StockAdjuster:
    """Serializes stock changes per product through a row lock."""

    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    @transaction.atomic
    def adjust(self, product_id: Optional[int], delta: int) -> None:
        if product_id is None or delta == 0:
            return
        if delta > 0:
            self._reserve(product_id, delta)
        else:
            self._restore(product_id, -delta)

    def _reserve(self, product_id: int, quantity: int) -> None:
        product = self._product_repo.get_for_update(product_id)
        if product is None:
            raise ProductNotFound(product_id, field="id")

        log = logger.bind(product_code=str(product.code), quantity=quantity)
        try:
            product.decrease_stock(quantity)
        except InsufficientStock:
            log.warning("stock.reservation_rejected", available=product.stock_quantity)
            raise

        self._product_repo.save(product)
        log.info("stock.reserved", remaining=product.stock_quantity)

    def _restore(self, product_id: int, quantity: int) -> None:
        product = self._product_repo.get_for_update(product_id)
        if product is None:
            logger.warning(
                "stock.restore_skipped",
                product_id=product_id,
                quantity=quantity,
                reason="product_not_found",
            )
            return

        product.increase_stock(quantity)
        self._product_repo.save(product)
        logger.info(
            "stock.restored",
            product_code=str(product.code),
            quantity=quantity,
            restored_stock=product.stock_quantity,
        )
