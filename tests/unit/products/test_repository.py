"""Unit tests for ProductDjangoRepository.

Covers:
- Look-ups by code and by id, including malformed codes.
- Case-insensitive name existence check with self-exclusion.
- list with ORM filters, save and delete.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.repositories.interfaces import IProductRepository

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_product(**overrides) -> Product:
    defaults = {
        "name": "Widget",
        "price": Decimal("19.99"),
        "stock_quantity": 10,
    }
    defaults.update(overrides)
    product = Product(**defaults)
    product.save()
    return product


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


# ===========================================================================
# Instantiation
# ===========================================================================


class TestRepositoryInstantiation:
    def test_is_instance_of_interface(self, repo):
        assert isinstance(repo, IProductRepository)


# ===========================================================================
# Look-ups
# ===========================================================================


class TestLookups:
    def test_get_by_code(self, repo):
        product = _make_product()
        assert repo.get_by_code(product.code) == product

    def test_get_by_code_unknown_returns_none(self, repo):
        assert repo.get_by_code(uuid4()) is None

    def test_get_by_code_malformed_returns_none(self, repo):
        assert repo.get_by_code("not-a-uuid") is None

    def test_get_for_update_returns_fresh_row(self, repo):
        product = _make_product(stock_quantity=10)
        Product.objects.filter(pk=product.pk).update(stock_quantity=3)

        locked = repo.get_for_update(product.id)

        assert locked.stock_quantity == 3


# ===========================================================================
# exists_by_name
# ===========================================================================


class TestExistsByName:
    def test_matches_ignoring_case_and_whitespace(self, repo):
        _make_product(name="Widget")
        assert repo.exists_by_name("  wIDGET ") is True

    def test_unknown_name(self, repo):
        _make_product(name="Widget")
        assert repo.exists_by_name("Sprocket") is False

    def test_excludes_given_id(self, repo):
        product = _make_product(name="Widget")
        assert repo.exists_by_name("widget", exclude_id=product.id) is False


# ===========================================================================
# list / save / delete
# ===========================================================================


class TestListSaveDelete:
    def test_list_all(self, repo):
        _make_product(name="A")
        _make_product(name="B")
        assert repo.list().count() == 2

    def test_list_with_filters(self, repo):
        _make_product(name="Cheap", price=Decimal("1.00"))
        _make_product(name="Pricey", price=Decimal("100.00"))

        names = [p.name for p in repo.list({"price__lte": Decimal("50.00")})]

        assert names == ["Cheap"]

    def test_save_update_bumps_version(self, repo):
        product = _make_product()
        product.stock_quantity = 42

        saved = repo.save(product)

        assert saved.version == 1
        product.refresh_from_db()
        assert product.stock_quantity == 42

    def test_delete_removes_row(self, repo):
        product = _make_product()
        repo.delete(product)
        assert not Product.objects.filter(code=product.code).exists()
