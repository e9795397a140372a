"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: INITIAL ACCOUNTING SCHEMA

Creates:
- ChartOfAccounts / Account
- Currency / ExchangeRate
- JournalEntry (GL journal header) with one-active-journal-per-source guard
- JournalLine (immutable debit OR credit posting)
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ChartOfAccounts",
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
                ("name", models.CharField(max_length=100, unique=True)),
                (
                    "code",
                    models.SlugField(
                        max_length=64,
                        unique=True,
                        help_text="Stable chart key used by resolvers/seeders. Do not change after go-live.",
                    ),
                ),
                (
                    "business_type",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("trading", "Trading"),
                            ("logistics", "Logistics"),
                            ("general", "General"),
                        ],
                        default="general",
                        db_index=True,
                    ),
                ),
                ("is_active", models.BooleanField(default=False, db_index=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Chart of Accounts",
                "verbose_name_plural": "Charts of Accounts",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Account",
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
                ("code", models.CharField(max_length=10)),
                ("name", models.CharField(max_length=150)),
                (
                    "account_type",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("ASSET", "Asset"),
                            ("LIABILITY", "Liability"),
                            ("EQUITY", "Equity"),
                            ("REVENUE", "Revenue"),
                            ("EXPENSE", "Expense"),
                        ],
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "chart",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="accounts",
                        to="accounting.chartofaccounts",
                    ),
                ),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["code"],
                "indexes": [
                    models.Index(fields=["chart", "code"], name="accounting__chart_i_6a1f0e_idx"),
                    models.Index(fields=["chart", "account_type"], name="accounting__chart_i_93c2d4_idx"),
                    models.Index(fields=["is_active"], name="accounting__is_acti_5b7e21_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("chart", "code"),
                        name="uniq_account_chart_code",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("code", ""), _negated=True),
                        name="chk_account_code_not_blank",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("name", ""), _negated=True),
                        name="chk_account_name_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Currency",
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
                ("code", models.CharField(max_length=10, unique=True)),
                ("name", models.CharField(blank=True, default="", max_length=100)),
                (
                    "conversion_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=18,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.000001"))
                        ],
                        help_text="Fixed rate to base currency (1 unit = ? base). Empty = use dated rates.",
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["code"],
                "verbose_name_plural": "Currencies",
            },
        ),
        migrations.CreateModel(
            name="ExchangeRate",
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
                ("effective_from", models.DateField()),
                (
                    "rate_to_base",
                    models.DecimalField(
                        decimal_places=6,
                        max_digits=18,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.000001"))
                        ],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "currency",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rates",
                        to="accounting.currency",
                    ),
                ),
            ],
            options={
                "ordering": ["currency", "-effective_from"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("currency", "effective_from"),
                        name="uniq_exchange_rate_currency_date",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
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
                ("journal_number", models.CharField(max_length=30, unique=True)),
                ("journal_date", models.DateField(help_text="Accounting effective date")),
                (
                    "source_type",
                    models.CharField(
                        max_length=40,
                        help_text="Producing module (e.g. OPENING_BALANCE)",
                    ),
                ),
                ("source_id", models.CharField(max_length=64)),
                ("source_name", models.CharField(blank=True, default="", max_length=100)),
                ("memo", models.TextField(help_text="Narrative description of the journal")),
                (
                    "exchange_rate",
                    models.DecimalField(
                        decimal_places=6,
                        default=Decimal("1.000000"),
                        max_digits=18,
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=18,
                        help_text="Total debits (== total credits)",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("is_deleted", models.BooleanField(db_index=True, default=False)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                (
                    "currency",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journals",
                        to="accounting.currency",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="gl_journals_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "superseded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="supersedes",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "verbose_name": "GL Journal",
                "verbose_name_plural": "GL Journals",
                "ordering": ["-journal_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["journal_date"], name="accounting__journal_4d0b8f_idx"),
                    models.Index(fields=["source_type", "source_id"], name="accounting__source__8e2a71_idx"),
                    models.Index(fields=["created_at"], name="accounting__created_c31f55_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_deleted", False)),
                        fields=("source_type", "source_id"),
                        name="uniq_active_journal_per_source",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
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
                ("line_no", models.PositiveIntegerField()),
                (
                    "debit",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=18
                    ),
                ),
                (
                    "credit",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=18
                    ),
                ),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                (
                    "entity_type",
                    models.CharField(
                        blank=True,
                        choices=[("CUSTOMER", "Customer"), ("SUPPLIER", "Supplier")],
                        default="",
                        max_length=20,
                    ),
                ),
                ("entity_id", models.CharField(blank=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_lines",
                        to="accounting.account",
                    ),
                ),
                (
                    "journal",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="lines",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "verbose_name": "GL Journal Line",
                "verbose_name_plural": "GL Journal Lines",
                "ordering": ["journal_id", "line_no"],
                "indexes": [
                    models.Index(fields=["account"], name="accounting__account_0f9c3e_idx"),
                    models.Index(fields=["journal", "line_no"], name="accounting__journal_7b52aa_idx"),
                    models.Index(fields=["entity_type", "entity_id"], name="accounting__entity__e41d09_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("journal", "line_no"),
                        name="uniq_journal_line_no",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("credit", 0), ("debit__gt", 0)),
                            models.Q(("credit__gt", 0), ("debit", 0)),
                            _connector="OR",
                        ),
                        name="chk_journal_line_one_side",
                    ),
                ],
            },
        ),
    ]
