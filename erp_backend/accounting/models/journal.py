# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
GL JOURNAL MODEL

Represents a single accounting transaction (journal header).

Guarantees:
- Immutable once created (no field updates through save(), no deletes)
- Soft invalidation only: is_deleted / deleted_at / superseded_by are set
  by the journal engine via queryset updates, never by editing the row
- At most ONE active journal per (source_type, source_id)
- journal_date is the accounting effective date
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class JournalEntryQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_deleted=False)

    def for_source(self, source_type: str, source_id):
        return self.filter(source_type=source_type, source_id=str(source_id))


class JournalEntry(models.Model):
    journal_number = models.CharField(max_length=30, unique=True)

    journal_date = models.DateField(help_text="Accounting effective date")

    source_type = models.CharField(
        max_length=40,
        help_text="Producing module (e.g. OPENING_BALANCE)",
    )
    source_id = models.CharField(max_length=64)
    source_name = models.CharField(max_length=100, blank=True, default="")

    memo = models.TextField(help_text="Narrative description of the journal")

    currency = models.ForeignKey(
        "accounting.Currency",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="journals",
    )
    exchange_rate = models.DecimalField(
        max_digits=18, decimal_places=6, default=Decimal("1.000000")
    )
    total_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        help_text="Total debits (== total credits)",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="gl_journals_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    is_deleted = models.BooleanField(default=False, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    superseded_by = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supersedes",
    )

    objects = JournalEntryQuerySet.as_manager()

    class Meta:
        ordering = ["-journal_date", "-created_at"]
        indexes = [
            models.Index(fields=["journal_date"], name="accounting__journal_4d0b8f_idx"),
            models.Index(fields=["source_type", "source_id"], name="accounting__source__8e2a71_idx"),
            models.Index(fields=["created_at"], name="accounting__created_c31f55_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["source_type", "source_id"],
                condition=Q(is_deleted=False),
                name="uniq_active_journal_per_source",
            ),
        ]
        verbose_name = "GL Journal"
        verbose_name_plural = "GL Journals"

    def __str__(self):
        return f"{self.journal_number} – {self.journal_date}"

    @property
    def reference(self) -> str:
        return f"{self.source_type}:{self.source_id}"

    def clean(self):
        self.memo = (self.memo or "").strip()
        if not self.memo:
            raise ValidationError("Journal memo is required")

        self.source_type = (self.source_type or "").strip().upper()
        self.source_id = str(self.source_id or "").strip()
        if not self.source_type or not self.source_id:
            raise ValidationError("Journal source_type and source_id are required")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("GL journals are immutable once created")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("GL journals cannot be deleted; invalidate them instead")
