# accounting/models/journal_line.py

"""
======================================================
PATH: accounting/models/journal_line.py
======================================================
GL JOURNAL LINE MODEL

One debit OR one credit posting to a single account.

Guarantees:
- Immutable once created (no updates, no deletes)
- Exactly one of debit / credit is non-zero, and it is positive
- entity_type / entity_id tag the line back to the party it came from
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.journal import JournalEntry


class JournalLine(models.Model):
    ENTITY_CUSTOMER = "CUSTOMER"
    ENTITY_SUPPLIER = "SUPPLIER"

    ENTITY_TYPES = [
        (ENTITY_CUSTOMER, "Customer"),
        (ENTITY_SUPPLIER, "Supplier"),
    ]

    journal = models.ForeignKey(
        JournalEntry,
        on_delete=models.PROTECT,
        related_name="lines",
    )

    line_no = models.PositiveIntegerField()

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_lines",
    )

    debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    description = models.CharField(max_length=255, blank=True, default="")

    entity_type = models.CharField(
        max_length=20, choices=ENTITY_TYPES, blank=True, default=""
    )
    entity_id = models.CharField(max_length=64, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "GL Journal Line"
        verbose_name_plural = "GL Journal Lines"
        ordering = ["journal_id", "line_no"]
        indexes = [
            models.Index(fields=["account"], name="accounting__account_0f9c3e_idx"),
            models.Index(fields=["journal", "line_no"], name="accounting__journal_7b52aa_idx"),
            models.Index(fields=["entity_type", "entity_id"], name="accounting__entity__e41d09_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["journal", "line_no"],
                name="uniq_journal_line_no",
            ),
            models.CheckConstraint(
                condition=(Q(debit__gt=0) & Q(credit=0))
                | (Q(debit=0) & Q(credit__gt=0)),
                name="chk_journal_line_one_side",
            ),
        ]

    def __str__(self):
        side = f"Dr {self.debit}" if self.debit > 0 else f"Cr {self.credit}"
        return f"{side} → {self.account}"

    def clean(self):
        debit = self.debit or Decimal("0.00")
        credit = self.credit or Decimal("0.00")

        if debit < 0 or credit < 0:
            raise ValidationError("Debit or credit cannot be negative")
        if (debit > 0) == (credit > 0):
            raise ValidationError("A journal line must have exactly one of debit or credit")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("GL journal lines are immutable and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("GL journal lines are immutable and cannot be deleted")
