"""Integration tests for Order read endpoints.

Covers:
- List (lightweight rows, paginated).
- Retrieve with nested items by code.
- Items of one order via /orders/{code}/items/.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.dtos import CreateOrderDTO, OrderLineDTO

pytestmark = pytest.mark.integration

BASE = "/api/v1/orders/"


@pytest.fixture()
def order(order_service, widget, gadget):
    return order_service.create_order(
        CreateOrderDTO(
            customer_name="Jane Doe",
            customer_email="jane@example.com",
            items=[
                OrderLineDTO(product_code=widget.code, quantity=1),
                OrderLineDTO(product_code=gadget.code, quantity=2),
            ],
        )
    )


class TestOrderList:
    def test_list_returns_rows_without_items(self, api_client, order):
        response = api_client.get(BASE)
        assert response.status_code == 200
        [row] = response.json()["results"]
        assert row["code"] == str(order.code)
        assert row["total_amount"] == "49.99"
        assert "items" not in row


class TestOrderRetrieve:
    def test_retrieve_includes_items(self, api_client, order):
        response = api_client.get(f"{BASE}{order.code}/")
        assert response.status_code == 200
        data = response.json()
        assert data["customer_email"] == "jane@example.com"
        assert len(data["items"]) == 2

    def test_retrieve_unknown_returns_404(self, api_client):
        response = api_client.get(f"{BASE}{uuid4()}/")
        assert response.status_code == 404

    def test_retrieve_after_product_deleted(self, api_client, order, widget):
        widget.delete()

        data = api_client.get(f"{BASE}{order.code}/").json()

        orphan = next(i for i in data["items"] if i["product_name"] == "Deluxe Widget")
        assert orphan["product_code"] is None
        assert orphan["unit_price"] == "29.99"


class TestOrderItemsAction:
    def test_lists_items_of_order(self, api_client, order):
        response = api_client.get(f"{BASE}{order.code}/items/")
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert {r["product_name"] for r in data["results"]} == {
            "Deluxe Widget",
            "Pocket Gadget",
        }

    def test_unknown_order_returns_404(self, api_client):
        response = api_client.get(f"{BASE}{uuid4()}/items/")
        assert response.status_code == 404
