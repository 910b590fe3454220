"""Product DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.products.models import Product


class ProductInputSerializer(serializers.Serializer):
    """Validates product create/update payloads."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField(
        max_length=2000, required=False, allow_blank=True
    )
    price = serializers.DecimalField(
        max_digits=19, decimal_places=2, min_value=Decimal("0.01")
    )
    stock_quantity = serializers.IntegerField(min_value=0)


class ProductUpdateSerializer(ProductInputSerializer):
    version = serializers.IntegerField(min_value=0)


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "code",
            "name",
            "description",
            "price",
            "stock_quantity",
            "created_at",
            "updated_at",
            "version",
        ]
        read_only_fields = fields
