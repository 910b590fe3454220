"""Order API views.

Exposes ``OrderService`` and ``OrderItemService`` via HTTP using DRF
ViewSets.  Domain exceptions propagate to
``modules.core.exception_handler``, which translates them into HTTP
status codes.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    OrderLineDTO,
    UpdateOrderDTO,
    UpdateOrderItemDTO,
)
from modules.orders.filters import OrderFilter, OrderItemFilter
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderItemDjangoRepository,
)
from modules.orders.serializers import (
    CreateOrderItemSerializer,
    CreateOrderSerializer,
    OrderItemSerializer,
    OrderListSerializer,
    OrderSerializer,
    UpdateOrderItemSerializer,
    UpdateOrderSerializer,
)
from modules.orders.services import OrderItemService, OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.stock import StockAdjuster


class OrderViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination
    lookup_field = "code"
    http_method_names = ["get", "post", "put", "delete", "head", "options"]
    filterset_class = OrderFilter
    ordering_fields = ["order_date", "total_amount", "status", "customer_name"]
    ordering = ["-order_date", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        products = ProductDjangoRepository()
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            order_item_repository=OrderItemDjangoRepository(),
            product_repository=products,
            stock_adjuster=StockAdjuster(products),
        )

    def get_queryset(self):
        return self._service.list_orders()

    def get_serializer_class(self):
        if self.action == "list":
            return OrderListSerializer
        return OrderSerializer

    # ------------------------------------------------------------------
    # Create / Retrieve
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        dto = CreateOrderDTO(
            customer_name=data["customer_name"],
            customer_email=data["customer_email"],
            items=[OrderLineDTO(**line) for line in data["items"]],
        )
        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, code: str | None = None) -> Response:
        """GET /api/v1/orders/{code}/"""
        order = self._service.get_order(code)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Update / Delete
    # ------------------------------------------------------------------

    def update(self, request: Request, code: str | None = None) -> Response:
        """PUT /api/v1/orders/{code}/

        Moving to ``CANCELLED`` returns the reserved stock.
        """
        serializer = UpdateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.update_order(
            code, UpdateOrderDTO(**serializer.validated_data)
        )
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, code: str | None = None) -> Response:
        """DELETE /api/v1/orders/{code}/"""
        self._service.delete_order(code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Items of one order
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get"], url_path="items")
    def items(self, request: Request, code: str | None = None) -> Response:
        """GET /api/v1/orders/{code}/items/"""
        queryset = self._service.list_order_items(code)

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = OrderItemSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(OrderItemSerializer(queryset, many=True).data)


class OrderItemViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for order items addressed on their own.

    Every write also recalculates and saves the parent order's total.
    """

    queryset = OrderItem.objects.all()
    serializer_class = OrderItemSerializer
    pagination_class = StandardResultsSetPagination
    lookup_field = "code"
    http_method_names = ["get", "post", "put", "delete", "head", "options"]
    filterset_class = OrderItemFilter
    filter_backends = [DjangoFilterBackend]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        products = ProductDjangoRepository()
        self._service = OrderItemService(
            order_item_repository=OrderItemDjangoRepository(),
            order_repository=OrderDjangoRepository(),
            product_repository=products,
            stock_adjuster=StockAdjuster(products),
        )

    def get_queryset(self):
        return self._service.list_items()

    def create(self, request: Request) -> Response:
        """POST /api/v1/order-items/"""
        serializer = CreateOrderItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = self._service.create_item(
            CreateOrderItemDTO(**serializer.validated_data)
        )
        return Response(
            OrderItemSerializer(item).data, status=status.HTTP_201_CREATED
        )

    def retrieve(self, request: Request, code: str | None = None) -> Response:
        """GET /api/v1/order-items/{code}/"""
        item = self._service.get_item(code)
        return Response(OrderItemSerializer(item).data)

    def update(self, request: Request, code: str | None = None) -> Response:
        """PUT /api/v1/order-items/{code}/"""
        serializer = UpdateOrderItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = self._service.update_item(
            code, UpdateOrderItemDTO(**serializer.validated_data)
        )
        return Response(OrderItemSerializer(item).data)

    def destroy(self, request: Request, code: str | None = None) -> Response:
        """DELETE /api/v1/order-items/{code}/"""
        self._service.delete_item(code)
        return Response(status=status.HTTP_204_NO_CONTENT)
