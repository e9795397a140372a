# opening_balances/api/filters.py

import django_filters
from django.db.models import Q

from opening_balances.models import OpeningBalanceBatch


class OpeningBalanceBatchFilter(django_filters.FilterSet):
    """
    /api/opening-balances/batches/?status=8&date_from=2026-01-01&search=OB-26
    """

    status = django_filters.TypedChoiceFilter(
        choices=OpeningBalanceBatch.STATUS_CHOICES, coerce=int
    )
    edit_request_status = django_filters.TypedChoiceFilter(
        choices=OpeningBalanceBatch.EDIT_REQUEST_CHOICES, coerce=int
    )
    date_from = django_filters.DateFilter(field_name="opening_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="opening_date", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = OpeningBalanceBatch
        fields = ["status", "edit_request_status", "date_from", "date_to", "search"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(batch_no__icontains=value) | Q(notes__icontains=value))
