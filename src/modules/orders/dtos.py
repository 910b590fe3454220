"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``OrderLineDTO``: one requested line in an order creation request.
- ``CreateOrderDTO``: input for order creation (nested lines).
- ``UpdateOrderDTO``: customer fields, target status and expected version.
- ``CreateOrderItemDTO``: input for adding an item to an existing order.
- ``UpdateOrderItemDTO``: new quantity and expected version.
"""

from __future__ import annotations

from typing import Annotated, List
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)

from modules.orders.constants import OrderStatus


def _non_blank(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Customer name must not be blank.")
    return v.strip()


CustomerName = Annotated[str, Field(max_length=255), AfterValidator(_non_blank)]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class OrderLineDTO(BaseModel):
    """Immutable DTO for a single line in an order creation request.

    The client sends ``product_code`` and ``quantity``; name and
    ``unit_price`` are snapshotted from the catalog by the Service Layer.
    """

    model_config = ConfigDict(frozen=True)

    product_code: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``items`` must contain at least one line.
    - Each line quantity must be positive.

    Repeated product codes are rejected by the service
    (``DuplicateLineItem``) so the error lists the offending codes.
    """

    model_config = ConfigDict(frozen=True)

    customer_name: CustomerName
    customer_email: EmailStr
    items: List[OrderLineDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(cls, v: List[OrderLineDTO]) -> List[OrderLineDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


class UpdateOrderDTO(BaseModel):
    """Immutable DTO for order updates (full replacement of editable fields)."""

    model_config = ConfigDict(frozen=True)

    customer_name: CustomerName
    customer_email: EmailStr
    status: OrderStatus
    version: int = Field(ge=0)


# ---------------------------------------------------------------------------
# Order items
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for adding a line to an existing order."""

    model_config = ConfigDict(frozen=True)

    order_code: UUID
    product_code: UUID
    quantity: int = Field(ge=1)


class UpdateOrderItemDTO(BaseModel):
    """Immutable DTO for changing an item's quantity."""

    model_config = ConfigDict(frozen=True)

    quantity: int = Field(ge=1)
    version: int = Field(ge=0)
