"""Unit tests for ProductService.

Covers:
- create_product: happy path, duplicate name (case-insensitive).
- update_product: happy path, stale version, duplicate name, self rename.
- delete_product: removal keeps order item snapshots.
- get_product / list_products.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.core.exceptions import OptimisticLockConflict
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def service():
    return ProductService(repository=ProductDjangoRepository())


@pytest.fixture()
def existing():
    return Product.objects.create(
        name="Existing Widget",
        description="Original",
        price=Decimal("10.00"),
        stock_quantity=5,
    )


def _update_dto(**overrides) -> UpdateProductDTO:
    data = {
        "name": "Existing Widget",
        "price": Decimal("12.50"),
        "stock_quantity": 8,
        "version": 0,
    }
    data.update(overrides)
    return UpdateProductDTO(**data)


# ===========================================================================
# create_product
# ===========================================================================


class TestCreateProduct:
    def test_creates_product(self, service):
        product = service.create_product(
            CreateProductDTO(name="New Widget", price=Decimal("3.50"), stock_quantity=7)
        )

        assert product.pk is not None
        assert product.version == 0
        assert Product.objects.get(code=product.code).stock_quantity == 7

    def test_duplicate_name_any_case_raises(self, service, existing):
        with pytest.raises(ProductAlreadyExists) as exc_info:
            service.create_product(
                CreateProductDTO(name="EXISTING widget", price=Decimal("1.00"))
            )

        assert exc_info.value.field == "name"
        assert Product.objects.count() == 1


# ===========================================================================
# update_product
# ===========================================================================


class TestUpdateProduct:
    def test_updates_fields_and_bumps_version(self, service, existing):
        product = service.update_product(existing.code, _update_dto())

        assert product.version == 1
        existing.refresh_from_db()
        assert existing.price == Decimal("12.50")
        assert existing.stock_quantity == 8
        assert existing.description == "Original"

    def test_description_replaced_when_given(self, service, existing):
        service.update_product(existing.code, _update_dto(description="New text"))

        existing.refresh_from_db()
        assert existing.description == "New text"

    def test_can_change_case_of_own_name(self, service, existing):
        product = service.update_product(
            existing.code, _update_dto(name="EXISTING WIDGET")
        )
        assert product.name == "EXISTING WIDGET"

    def test_name_taken_by_other_product_raises(self, service, existing):
        Product.objects.create(name="Other", price=Decimal("1.00"))

        with pytest.raises(ProductAlreadyExists):
            service.update_product(existing.code, _update_dto(name="other"))

    def test_stale_version_raises_and_changes_nothing(self, service, existing):
        existing.save()  # version 1

        with pytest.raises(OptimisticLockConflict):
            service.update_product(existing.code, _update_dto(version=0))

        existing.refresh_from_db()
        assert existing.price == Decimal("10.00")
        assert existing.version == 1

    def test_unknown_code_raises(self, service):
        with pytest.raises(ProductNotFound):
            service.update_product(uuid4(), _update_dto())


# ===========================================================================
# delete / queries
# ===========================================================================


class TestDeleteAndQueries:
    def test_delete_product(self, service, existing):
        service.delete_product(existing.code)
        assert not Product.objects.filter(pk=existing.pk).exists()

    def test_delete_unknown_raises(self, service):
        with pytest.raises(ProductNotFound):
            service.delete_product(uuid4())

    def test_get_product(self, service, existing):
        assert service.get_product(existing.code) == existing

    def test_get_unknown_raises(self, service):
        with pytest.raises(ProductNotFound):
            service.get_product(uuid4())

    def test_list_products_with_filters(self, service, existing):
        Product.objects.create(name="Another", price=Decimal("99.00"))

        result = service.list_products({"price__lt": Decimal("50.00")})

        assert list(result) == [existing]
