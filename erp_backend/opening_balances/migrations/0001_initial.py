"""
======================================================
PATH: opening_balances/migrations/0001_initial.py
======================================================
MIGRATION: CREATE OpeningBalanceBatch + OpeningBalanceLine

- Batch header with status / edit-request sub-state and custom
  submit / approve permissions
- Lines unique per (batch, party_type, party_id)
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="OpeningBalanceBatch",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("company_id", models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                ("batch_no", models.CharField(max_length=30, unique=True)),
                ("opening_date", models.DateField()),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (3, "Draft"),
                            (8, "Submitted for Approval"),
                            (1, "Approved"),
                            (2, "Rejected"),
                        ],
                        db_index=True,
                        default=3,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                (
                    "edit_request_status",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (0, "None"),
                            (3, "Pending"),
                            (1, "Approved"),
                            (2, "Rejected"),
                        ],
                        db_index=True,
                        default=0,
                    ),
                ),
                ("edit_requested_at", models.DateTimeField(blank=True, null=True)),
                ("edit_request_reason", models.TextField(blank=True, default="")),
                ("edit_approved_at", models.DateTimeField(blank=True, null=True)),
                ("edit_rejection_reason", models.TextField(blank=True, default="")),
                (
                    "gl_journal",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="opening_balance_batches",
                        to="accounting.journalentry",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ob_batches_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ob_batches_updated",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ob_batches_approved",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "edit_requested_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ob_edit_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "edit_approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ob_edit_decisions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Opening Balance Batch",
                "verbose_name_plural": "Opening Balance Batches",
                "ordering": ["-opening_date", "-created_at"],
                "permissions": [
                    ("submit_openingbalancebatch", "Can submit opening balance batch for approval"),
                    ("approve_openingbalancebatch", "Can approve or reject opening balance batches"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("status__in", [1, 2, 3, 8])),
                        name="chk_ob_batch_status_valid",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("edit_request_status__in", [0, 1, 2, 3])),
                        name="chk_ob_batch_edit_status_valid",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("edit_request_status", 3), _negated=True),
                            ("status", 1),
                            _connector="OR",
                        ),
                        name="chk_ob_pending_edit_on_approved",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OpeningBalanceLine",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "party_type",
                    models.CharField(
                        choices=[("CUSTOMER", "Customer"), ("SUPPLIER", "Supplier")],
                        max_length=10,
                    ),
                ),
                ("party_id", models.PositiveBigIntegerField()),
                ("currency_code", models.CharField(max_length=10)),
                (
                    "fx_rate_to_base",
                    models.DecimalField(decimal_places=6, default=Decimal("1.000000"), max_digits=18),
                ),
                (
                    "debit_foreign",
                    models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18),
                ),
                (
                    "credit_foreign",
                    models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18),
                ),
                (
                    "debit_base",
                    models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18),
                ),
                (
                    "credit_base",
                    models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "batch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="opening_balances.openingbalancebatch",
                    ),
                ),
                (
                    "currency",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="opening_balance_lines",
                        to="accounting.currency",
                    ),
                ),
            ],
            options={
                "verbose_name": "Opening Balance Line",
                "verbose_name_plural": "Opening Balance Lines",
                "ordering": ["party_type", "party_id"],
                "indexes": [
                    models.Index(fields=["party_type", "party_id"], name="ob_line_party_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("batch", "party_type", "party_id"),
                        name="uniq_ob_line_batch_party",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("debit_foreign__gte", 0), ("credit_foreign__gte", 0)),
                        name="chk_ob_line_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("debit_foreign__gt", 0),
                            ("credit_foreign__gt", 0),
                            _connector="OR",
                        ),
                        name="chk_ob_line_has_amount",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("fx_rate_to_base__gt", 0)),
                        name="chk_ob_line_fx_positive",
                    ),
                ],
            },
        ),
    ]
