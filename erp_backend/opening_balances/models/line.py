# opening_balances/models/line.py

"""
OPENING BALANCE LINE

One row per party per batch. Base-currency amounts are always derived
(foreign x fx_rate_to_base) when the line is written, never entered.

Lines have no identity across edits: a batch update deletes and reinserts
all of them.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q

from opening_balances.models.batch import OpeningBalanceBatch


class OpeningBalanceLine(models.Model):
    PARTY_CUSTOMER = "CUSTOMER"
    PARTY_SUPPLIER = "SUPPLIER"

    PARTY_TYPES = [
        (PARTY_CUSTOMER, "Customer"),
        (PARTY_SUPPLIER, "Supplier"),
    ]

    batch = models.ForeignKey(
        OpeningBalanceBatch,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    party_type = models.CharField(max_length=10, choices=PARTY_TYPES)
    party_id = models.PositiveBigIntegerField()

    currency = models.ForeignKey(
        "accounting.Currency",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="opening_balance_lines",
    )
    currency_code = models.CharField(max_length=10)
    fx_rate_to_base = models.DecimalField(
        max_digits=18, decimal_places=6, default=Decimal("1.000000")
    )

    debit_foreign = models.DecimalField(max_digits=18, decimal_places=4, default=Decimal("0"))
    credit_foreign = models.DecimalField(max_digits=18, decimal_places=4, default=Decimal("0"))
    debit_base = models.DecimalField(max_digits=18, decimal_places=4, default=Decimal("0"))
    credit_base = models.DecimalField(max_digits=18, decimal_places=4, default=Decimal("0"))

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["party_type", "party_id"]
        verbose_name = "Opening Balance Line"
        verbose_name_plural = "Opening Balance Lines"
        indexes = [
            models.Index(fields=["party_type", "party_id"], name="ob_line_party_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["batch", "party_type", "party_id"],
                name="uniq_ob_line_batch_party",
            ),
            models.CheckConstraint(
                condition=Q(debit_foreign__gte=0) & Q(credit_foreign__gte=0),
                name="chk_ob_line_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(debit_foreign__gt=0) | Q(credit_foreign__gt=0),
                name="chk_ob_line_has_amount",
            ),
            models.CheckConstraint(
                condition=Q(fx_rate_to_base__gt=0),
                name="chk_ob_line_fx_positive",
            ),
        ]

    def __str__(self):
        return f"{self.party_type}:{self.party_id} Dr {self.debit_base} Cr {self.credit_base}"

    @property
    def net_base(self) -> Decimal:
        return (self.debit_base or Decimal("0")) - (self.credit_base or Decimal("0"))
