"""Integration tests for Product API endpoints.

Covers:
- CRUD operations via /api/v1/products/ addressed by code.
- Domain exception mapping (404, 409).
- Optimistic locking on PUT.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

BASE = "/api/v1/products/"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_product():
    """A persisted Product instance."""
    product = Product(
        name="Widget Alpha",
        description="A fine widget",
        price=Decimal("19.99"),
        stock_quantity=100,
    )
    product.save()
    return product


def _payload(**overrides):
    data = {
        "name": "Widget Beta",
        "description": "Another widget",
        "price": "9.90",
        "stock_quantity": 12,
    }
    data.update(overrides)
    return data


# ===========================================================================
# LIST / RETRIEVE
# ===========================================================================


class TestProductRead:
    def test_list_empty(self, api_client):
        response = api_client.get(BASE)
        assert response.status_code == 200
        assert response.json()["results"] == []

    def test_list_returns_products(self, api_client, sample_product):
        response = api_client.get(BASE)
        results = response.json()["results"]
        assert len(results) == 1
        assert results[0]["code"] == str(sample_product.code)
        assert results[0]["version"] == 0

    def test_retrieve_success(self, api_client, sample_product):
        response = api_client.get(f"{BASE}{sample_product.code}/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Widget Alpha"
        assert data["price"] == "19.99"
        assert data["stock_quantity"] == 100
        assert "id" not in data

    def test_retrieve_not_found(self, api_client):
        response = api_client.get(f"{BASE}{uuid4()}/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "not_found"

    def test_retrieve_malformed_code_is_404(self, api_client):
        response = api_client.get(f"{BASE}not-a-code/")
        assert response.status_code == 404


# ===========================================================================
# CREATE
# ===========================================================================


class TestProductCreate:
    def test_create_success(self, api_client):
        response = api_client.post(BASE, _payload(), format="json")
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Widget Beta"
        assert data["version"] == 0
        assert Product.objects.filter(code=data["code"]).exists()

    def test_create_trims_name(self, api_client):
        response = api_client.post(BASE, _payload(name="  Padded  "), format="json")
        assert response.json()["name"] == "Padded"

    def test_create_duplicate_name_returns_409(self, api_client, sample_product):
        response = api_client.post(
            BASE, _payload(name="WIDGET alpha"), format="json"
        )
        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "duplicate_resource"

    def test_create_missing_fields_returns_400(self, api_client):
        response = api_client.post(BASE, {}, format="json")
        assert response.status_code == 400
        attrs = {e["attr"] for e in response.json()["errors"]}
        assert {"name", "price", "stock_quantity"} <= attrs

    @pytest.mark.parametrize("price", ["0", "-1.00"])
    def test_create_invalid_price_returns_400(self, api_client, price):
        response = api_client.post(BASE, _payload(price=price), format="json")
        assert response.status_code == 400

    def test_create_negative_stock_returns_400(self, api_client):
        response = api_client.post(BASE, _payload(stock_quantity=-1), format="json")
        assert response.status_code == 400


# ===========================================================================
# UPDATE
# ===========================================================================


class TestProductUpdate:
    def test_put_update_success(self, api_client, sample_product):
        response = api_client.put(
            f"{BASE}{sample_product.code}/",
            _payload(name="Widget Alpha", price="21.00", version=0),
            format="json",
        )
        assert response.status_code == 200
        data = response.json()
        assert data["price"] == "21.00"
        assert data["version"] == 1

    def test_put_stale_version_returns_409(self, api_client, sample_product):
        url = f"{BASE}{sample_product.code}/"
        api_client.put(url, _payload(version=0), format="json")

        response = api_client.put(url, _payload(price="1.00", version=0), format="json")

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "optimistic_lock_conflict"
        sample_product.refresh_from_db()
        assert sample_product.price == Decimal("9.90")

    def test_put_without_version_returns_400(self, api_client, sample_product):
        response = api_client.put(
            f"{BASE}{sample_product.code}/", _payload(), format="json"
        )
        assert response.status_code == 400

    def test_update_not_found(self, api_client):
        response = api_client.put(
            f"{BASE}{uuid4()}/", _payload(version=0), format="json"
        )
        assert response.status_code == 404

    def test_patch_not_allowed(self, api_client, sample_product):
        response = api_client.patch(
            f"{BASE}{sample_product.code}/", {"price": "1.00"}, format="json"
        )
        assert response.status_code == 405


# ===========================================================================
# DELETE
# ===========================================================================


class TestProductDelete:
    def test_destroy_success(self, api_client, sample_product):
        response = api_client.delete(f"{BASE}{sample_product.code}/")
        assert response.status_code == 204
        assert not Product.objects.filter(pk=sample_product.pk).exists()

    def test_destroy_not_found(self, api_client):
        response = api_client.delete(f"{BASE}{uuid4()}/")
        assert response.status_code == 404
