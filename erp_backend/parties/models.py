# parties/models.py

"""
PARTY DIRECTORY

Customers and suppliers share one table; party_type tells them apart.
Parties are deactivated, never deleted, once they are referenced.
"""

from django.core.exceptions import ValidationError
from django.db import models


class Party(models.Model):
    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"

    PARTY_TYPES = [
        (CUSTOMER, "Customer"),
        (SUPPLIER, "Supplier"),
    ]

    party_type = models.CharField(max_length=10, choices=PARTY_TYPES, db_index=True)
    display_name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=40, blank=True, default="")

    currency_code = models.CharField(
        max_length=10,
        blank=True,
        default="",
        help_text="Default trading currency (empty = base currency)",
    )

    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_name"]
        verbose_name_plural = "Parties"
        indexes = [
            models.Index(fields=["party_type", "display_name"], name="parties_type_name_idx"),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.get_party_type_display()})"

    def clean(self):
        self.display_name = (self.display_name or "").strip()
        self.currency_code = (self.currency_code or "").strip().upper()
        if not self.display_name:
            raise ValidationError({"display_name": "display_name is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
