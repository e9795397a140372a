# accounting/models/currency.py

"""
CURRENCY + EXCHANGE RATE MODELS

Currency.conversion_rate is a company-wide fixed rate (1 unit = ? base).
ExchangeRate rows are dated rates; the latest row effective on or before a
date wins. Both are read through accounting.services.fx_service only.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class Currency(models.Model):
    code = models.CharField(max_length=10, unique=True)
    name = models.CharField(max_length=100, blank=True, default="")

    conversion_rate = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.000001"))],
        help_text="Fixed rate to base currency (1 unit = ? base). Empty = use dated rates.",
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["code"]
        verbose_name_plural = "Currencies"

    def __str__(self):
        return self.code

    def clean(self):
        self.code = (self.code or "").strip().upper()
        if not self.code:
            raise ValidationError({"code": "Currency code is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class ExchangeRate(models.Model):
    currency = models.ForeignKey(
        Currency,
        on_delete=models.CASCADE,
        related_name="rates",
    )
    effective_from = models.DateField()
    rate_to_base = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        validators=[MinValueValidator(Decimal("0.000001"))],
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["currency", "-effective_from"]
        constraints = [
            models.UniqueConstraint(
                fields=["currency", "effective_from"],
                name="uniq_exchange_rate_currency_date",
            ),
        ]

    def __str__(self):
        return f"{self.currency.code} {self.rate_to_base} from {self.effective_from}"
