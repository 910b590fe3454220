import django_filters

from modules.orders.models import Order, OrderItem


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    customer_email = django_filters.CharFilter(
        field_name="customer_email", lookup_expr="iexact"
    )
    start_date = django_filters.DateFilter(
        field_name="order_date", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="order_date", lookup_expr="date__lte"
    )
    min_total = django_filters.NumberFilter(
        field_name="total_amount", lookup_expr="gte"
    )
    max_total = django_filters.NumberFilter(
        field_name="total_amount", lookup_expr="lte"
    )

    class Meta:
        model = Order
        fields = [
            "status",
            "customer_email",
            "start_date",
            "end_date",
            "min_total",
            "max_total",
        ]


class OrderItemFilter(django_filters.FilterSet):
    order = django_filters.UUIDFilter(field_name="order__code")
    product = django_filters.UUIDFilter(field_name="product__code")

    class Meta:
        model = OrderItem
        fields = ["order", "product"]
