"""Unit tests for Order DTOs.

Covers:
- OrderLineDTO: quantity validation, frozen immutability.
- CreateOrderDTO: non-empty lines, customer name and e-mail validation.
- UpdateOrderDTO: status choices and version.
- Order item DTOs.
"""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.constants import OrderStatus
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    OrderLineDTO,
    UpdateOrderDTO,
    UpdateOrderItemDTO,
)

pytestmark = pytest.mark.unit


def _line(**overrides) -> OrderLineDTO:
    data = {"product_code": uuid4(), "quantity": 1}
    data.update(overrides)
    return OrderLineDTO(**data)


class TestOrderLineDTO:
    def test_valid(self):
        code = uuid4()
        line = OrderLineDTO(product_code=code, quantity=3)
        assert line.product_code == code
        assert line.quantity == 3

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError, match="Quantity must be at least 1"):
            _line(quantity=quantity)

    def test_is_frozen(self):
        line = _line()
        with pytest.raises(ValidationError):
            line.quantity = 5


class TestCreateOrderDTO:
    def test_valid_and_name_trimmed(self):
        dto = CreateOrderDTO(
            customer_name="  Jane Doe ",
            customer_email="jane@example.com",
            items=[_line()],
        )
        assert dto.customer_name == "Jane Doe"

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            CreateOrderDTO(
                customer_name="Jane", customer_email="jane@example.com", items=[]
            )

    def test_blank_customer_name_rejected(self):
        with pytest.raises(ValidationError, match="must not be blank"):
            CreateOrderDTO(
                customer_name="   ", customer_email="jane@example.com", items=[_line()]
            )

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(
                customer_name="Jane", customer_email="not-an-email", items=[_line()]
            )

    def test_repeated_product_codes_left_to_service(self):
        code = uuid4()
        dto = CreateOrderDTO(
            customer_name="Jane",
            customer_email="jane@example.com",
            items=[_line(product_code=code), _line(product_code=code)],
        )
        assert len(dto.items) == 2


class TestUpdateOrderDTO:
    def test_status_coerced_to_enum(self):
        dto = UpdateOrderDTO(
            customer_name="Jane",
            customer_email="jane@example.com",
            status="PROCESSING",
            version=0,
        )
        assert dto.status is OrderStatus.PROCESSING

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            UpdateOrderDTO(
                customer_name="Jane",
                customer_email="jane@example.com",
                status="SHIPPED",
                version=0,
            )

    def test_negative_version_rejected(self):
        with pytest.raises(ValidationError):
            UpdateOrderDTO(
                customer_name="Jane",
                customer_email="jane@example.com",
                status="PENDING",
                version=-1,
            )


class TestOrderItemDTOs:
    def test_create_item_requires_positive_quantity(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(order_code=uuid4(), product_code=uuid4(), quantity=0)

    def test_update_item_requires_version(self):
        with pytest.raises(ValidationError):
            UpdateOrderItemDTO(quantity=2)

    def test_update_item_valid(self):
        dto = UpdateOrderItemDTO(quantity=5, version=0)
        assert dto.quantity == 5
