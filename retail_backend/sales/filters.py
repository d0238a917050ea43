"""
Sales list filters (location, customer, seller, status, payment status,
date range, free-text search).
"""
from django.db.models import Q
from django_filters import rest_framework as filters

from .models import Sale


class SaleFilter(filters.FilterSet):
    location = filters.UUIDFilter(field_name="location_id")
    customer = filters.UUIDFilter(field_name="customer_id")
    sold_by = filters.UUIDFilter(field_name="sold_by_id")

    status = filters.MultipleChoiceFilter(choices=Sale.Status.choices, conjoined=False)
    payment_status = filters.MultipleChoiceFilter(
        choices=Sale.PaymentStatus.choices, conjoined=False
    )

    # Plain dates include the whole day on both ends
    date_from = filters.DateFilter(field_name="sale_date", lookup_expr="date__gte")
    date_to = filters.DateFilter(field_name="sale_date", lookup_expr="date__lte")

    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = Sale
        fields = [
            "location",
            "customer",
            "sold_by",
            "status",
            "payment_status",
            "date_from",
            "date_to",
            "search",
        ]

    def filter_search(self, queryset, name, value):
        """Sale number, customer name or customer phone."""
        term = (value or "").strip()
        if not term:
            return queryset
        return queryset.filter(
            Q(sale_number__icontains=term)
            | Q(customer_name__icontains=term)
            | Q(customer_phone__icontains=term)
        )
