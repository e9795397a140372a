# PATH: opening_balances/services/queries.py

"""
Read-side querysets for the opening balance API.

List rows carry per-batch aggregates (base currency, net = debit - credit):
- total_lines
- customer_total
- supplier_total
"""

from decimal import Decimal

from django.db.models import Count, DecimalField, F, Prefetch, Q, Sum, Value
from django.db.models.functions import Coalesce

from accounting.models.journal_line import JournalLine
from opening_balances.models import OpeningBalanceBatch, OpeningBalanceLine

AMOUNT_FIELD = DecimalField(max_digits=18, decimal_places=4)
ZERO = Value(Decimal("0"), output_field=AMOUNT_FIELD)


def _net_total(party_type: str):
    return Coalesce(
        Sum(
            F("lines__debit_base") - F("lines__credit_base"),
            filter=Q(lines__party_type=party_type),
            output_field=AMOUNT_FIELD,
        ),
        ZERO,
        output_field=AMOUNT_FIELD,
    )


def batch_list_queryset():
    return (
        OpeningBalanceBatch.objects.select_related("created_by", "approved_by", "gl_journal")
        .annotate(
            total_lines=Count("lines", distinct=True),
            customer_total=_net_total(OpeningBalanceLine.PARTY_CUSTOMER),
            supplier_total=_net_total(OpeningBalanceLine.PARTY_SUPPLIER),
        )
        .order_by("-opening_date", "-created_at", "-id")
    )


def batch_detail_queryset():
    return OpeningBalanceBatch.objects.select_related(
        "created_by",
        "updated_by",
        "approved_by",
        "edit_requested_by",
        "edit_approved_by",
        "gl_journal",
    ).prefetch_related(
        Prefetch(
            "lines",
            queryset=OpeningBalanceLine.objects.select_related("currency").order_by(
                "party_type", "party_id"
            ),
        )
    )


def active_journal_lines(batch: OpeningBalanceBatch):
    """
    Lines of the batch's linked journal, or none when it has no journal or the
    journal was invalidated.
    """
    if batch.gl_journal_id is None:
        return JournalLine.objects.none()
    return (
        JournalLine.objects.filter(journal_id=batch.gl_journal_id, journal__is_deleted=False)
        .select_related("account", "journal")
        .order_by("line_no")
    )
