from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.chart import ChartOfAccounts


class Account(models.Model):
    """
    GL account inside one chart.

    AR / AP control accounts and Opening Balance Equity are plain rows here;
    accounting.services.account_resolver maps the keys AR, AP, EQUITY to
    configured codes in the active chart.

    normal_side is the side that increases the balance (Dr for assets and
    expenses, Cr otherwise). Opening balance contras (a customer credit inside
    AR, a supplier debit inside AP) post against it.
    """

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    ACCOUNT_TYPES = [
        (ASSET, "Asset"),
        (LIABILITY, "Liability"),
        (EQUITY, "Equity"),
        (REVENUE, "Revenue"),
        (EXPENSE, "Expense"),
    ]

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    DEBIT_NORMAL_TYPES = (ASSET, EXPENSE)

    chart = models.ForeignKey(
        ChartOfAccounts,
        on_delete=models.PROTECT,
        related_name="accounts",
    )

    code = models.CharField(max_length=10)
    name = models.CharField(max_length=150)
    account_type = models.CharField(max_length=20, choices=ACCOUNT_TYPES)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["chart", "code"], name="accounting__chart_i_6a1f0e_idx"),
            models.Index(fields=["chart", "account_type"], name="accounting__chart_i_93c2d4_idx"),
            models.Index(fields=["is_active"], name="accounting__is_acti_5b7e21_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["chart", "code"], name="uniq_account_chart_code"),
            models.CheckConstraint(condition=~Q(code=""), name="chk_account_code_not_blank"),
            models.CheckConstraint(condition=~Q(name=""), name="chk_account_name_not_blank"),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"

    @property
    def normal_side(self) -> str:
        return self.DEBIT if self.account_type in self.DEBIT_NORMAL_TYPES else self.CREDIT

    def clean(self):
        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()

        errors = {}
        if not self.code:
            errors["code"] = "Account code is required"
        if not self.name:
            errors["name"] = "Account name is required"
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
