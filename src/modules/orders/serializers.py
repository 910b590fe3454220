"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderLineSerializer(serializers.Serializer):
    """Validates a single line in an order creation request."""

    product_code = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    customer_name = serializers.CharField(max_length=255)
    customer_email = serializers.EmailField()
    items = OrderLineSerializer(many=True, allow_empty=False)


class UpdateOrderSerializer(serializers.Serializer):
    """Validates a full order update (PUT)."""

    customer_name = serializers.CharField(max_length=255)
    customer_email = serializers.EmailField()
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    version = serializers.IntegerField(min_value=0)


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a request adding a line to an existing order."""

    order_code = serializers.UUIDField()
    product_code = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class UpdateOrderItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    version = serializers.IntegerField(min_value=0)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items.

    ``product_name`` and ``unit_price`` are the snapshot taken when the
    item was created.  ``product_code`` is ``null`` once the product has
    been deleted.
    """

    order_code = serializers.UUIDField(source="order.code", read_only=True)
    product_code = serializers.UUIDField(
        source="product.code", read_only=True, allow_null=True
    )
    line_total = serializers.DecimalField(
        max_digits=19, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = [
            "code",
            "order_code",
            "product_code",
            "product_name",
            "unit_price",
            "quantity",
            "line_total",
            "created_at",
            "updated_at",
            "version",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items."""

    items = OrderItemSerializer(source="line_items", many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "code",
            "customer_name",
            "customer_email",
            "status",
            "total_amount",
            "order_date",
            "items",
            "created_at",
            "updated_at",
            "version",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "code",
            "customer_name",
            "customer_email",
            "status",
            "total_amount",
            "order_date",
            "version",
        ]
        read_only_fields = fields
