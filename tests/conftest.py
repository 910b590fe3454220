from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderItemDjangoRepository,
)
from modules.orders.services import OrderItemService, OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.stock import StockAdjuster


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def widget():
    """Product with stock 100 at 29.99."""
    return Product.objects.create(
        name="Deluxe Widget",
        description="The one everybody wants",
        price=Decimal("29.99"),
        stock_quantity=100,
    )


@pytest.fixture()
def gadget():
    return Product.objects.create(
        name="Pocket Gadget",
        price=Decimal("10.00"),
        stock_quantity=50,
    )


# ---------------------------------------------------------------------------
# Services wired with the Django repositories
# ---------------------------------------------------------------------------


@pytest.fixture()
def product_repository():
    return ProductDjangoRepository()


@pytest.fixture()
def stock_adjuster(product_repository):
    return StockAdjuster(product_repository)


@pytest.fixture()
def order_service(product_repository, stock_adjuster):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        order_item_repository=OrderItemDjangoRepository(),
        product_repository=product_repository,
        stock_adjuster=stock_adjuster,
    )


@pytest.fixture()
def order_item_service(product_repository, stock_adjuster):
    return OrderItemService(
        order_item_repository=OrderItemDjangoRepository(),
        order_repository=OrderDjangoRepository(),
        product_repository=product_repository,
        stock_adjuster=stock_adjuster,
    )
