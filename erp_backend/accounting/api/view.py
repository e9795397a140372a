# PATH: accounting/api/view.py

"""
PATH: accounting/api/view.py

ACCOUNTING API VIEWSETS (READ-ONLY / AUDIT SAFE)

- Journals and journal lines are never written through the API; the journal
  engine is the only writer.
- Permission-gated via Django model permissions (no role hardcoding):
    journals -> accounting.view_journalentry
    lines    -> accounting.view_journalline
- Filtering via django-filter:
    /api/accounting/journal-entries/?source_type=OPENING_BALANCE&source_id=12
    /api/accounting/journal-entries/?include_deleted=1
    /api/accounting/journal-lines/?journal=30&account=28
    /api/accounting/journal-lines/?entity_type=CUSTOMER&entity_id=7

Invalidated (soft-deleted) journals are hidden unless include_deleted=1.
"""

import django_filters
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import ReadOnlyModelViewSet

from accounting.api.serializers import JournalEntrySerializer, JournalLineSerializer
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine


class JournalEntryFilter(django_filters.FilterSet):
    source_type = django_filters.CharFilter(method="filter_source_type")
    date_from = django_filters.DateFilter(field_name="journal_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="journal_date", lookup_expr="lte")

    class Meta:
        model = JournalEntry
        fields = ["source_type", "source_id", "journal_number"]

    def filter_source_type(self, queryset, name, value):
        return queryset.filter(source_type=(value or "").strip().upper())


class JournalLineFilter(django_filters.FilterSet):
    entity_type = django_filters.CharFilter(method="filter_entity_type")

    class Meta:
        model = JournalLine
        fields = ["journal", "account", "entity_type", "entity_id"]

    def filter_entity_type(self, queryset, name, value):
        return queryset.filter(entity_type=(value or "").strip().upper())


def _include_deleted(request) -> bool:
    raw = (request.query_params.get("include_deleted") or "").strip().lower()
    return raw in ("1", "true", "yes")


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(
            name="include_deleted",
            type=bool,
            required=False,
            description="Include invalidated (superseded) journals. Default: false",
        ),
    ],
)
class JournalEntryViewSet(ReadOnlyModelViewSet):
    """
    Read-only access to GL journals (audit-safe).
    """

    permission_classes = [IsAuthenticated]
    serializer_class = JournalEntrySerializer
    filterset_class = JournalEntryFilter
    http_method_names = ["get", "head", "options"]

    queryset = JournalEntry.objects.select_related("currency").prefetch_related(
        "lines__account"
    )

    def get_queryset(self):
        if not self.request.user.has_perm("accounting.view_journalentry"):
            raise PermissionDenied("You do not have permission to view journal entries.")

        qs = super().get_queryset()
        if not _include_deleted(self.request):
            qs = qs.active()
        return qs.order_by("-journal_date", "-id")


@extend_schema(tags=["accounting"])
class JournalLineViewSet(ReadOnlyModelViewSet):
    """
    Read-only access to GL journal lines (append-only, audit-safe).

    Lines of invalidated journals are hidden unless include_deleted=1.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = JournalLineSerializer
    filterset_class = JournalLineFilter
    http_method_names = ["get", "head", "options"]

    queryset = JournalLine.objects.select_related("journal", "account")

    def get_queryset(self):
        if not self.request.user.has_perm("accounting.view_journalline"):
            raise PermissionDenied("You do not have permission to view journal lines.")

        qs = super().get_queryset()
        if not _include_deleted(self.request):
            qs = qs.filter(journal__is_deleted=False)
        return qs.order_by("journal_id", "line_no")
