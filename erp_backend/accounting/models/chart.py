# accounting/models/chart.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models, transaction


class ChartOfAccounts(models.Model):
    """
    Represents the Chart of Accounts of a company.

    Rules:
    - Only ONE chart can be active at a time.
    - A stable code exists so resolvers never depend on chart.name formatting.
    """

    BUSINESS_TRADING = "trading"
    BUSINESS_LOGISTICS = "logistics"
    BUSINESS_GENERAL = "general"

    BUSINESS_TYPE_CHOICES = [
        (BUSINESS_TRADING, "Trading"),
        (BUSINESS_LOGISTICS, "Logistics"),
        (BUSINESS_GENERAL, "General"),
    ]

    name = models.CharField(max_length=100, unique=True)

    code = models.SlugField(
        max_length=64,
        unique=True,
        help_text="Stable chart key used by resolvers/seeders. Do not change after go-live.",
    )

    business_type = models.CharField(
        max_length=32,
        choices=BUSINESS_TYPE_CHOICES,
        default=BUSINESS_GENERAL,
        db_index=True,
    )

    # default False; seeding activates explicitly
    is_active = models.BooleanField(default=False, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Chart of Accounts"
        verbose_name_plural = "Charts of Accounts"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.business_type})"

    def clean(self):
        self.name = (self.name or "").strip()
        self.code = (self.code or "").strip()
        if not self.name:
            raise ValidationError({"name": "name is required"})
        if not self.code:
            raise ValidationError({"code": "code is required"})

    def save(self, *args, **kwargs):
        """
        Enforce that only ONE Chart of Accounts can be active at a time,
        and clear resolver cache when switching actives.
        """
        self.full_clean()

        from accounting.services.account_resolver import clear_active_chart_cache

        with transaction.atomic():
            was_active = False
            if self.pk:
                prev = (
                    ChartOfAccounts.objects.filter(pk=self.pk)
                    .values_list("is_active", flat=True)
                    .first()
                )
                was_active = bool(prev)

            if self.is_active:
                ChartOfAccounts.objects.exclude(pk=self.pk).update(is_active=False)

            super().save(*args, **kwargs)

        if self.is_active or was_active:
            clear_active_chart_cache()
