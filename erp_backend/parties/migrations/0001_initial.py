"""
======================================================
PATH: parties/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Party (SHARED CUSTOMER / SUPPLIER DIRECTORY)
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Party",
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
                        db_index=True,
                        max_length=10,
                    ),
                ),
                ("display_name", models.CharField(max_length=200)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("phone", models.CharField(blank=True, default="", max_length=40)),
                (
                    "currency_code",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Default trading currency (empty = base currency)",
                        max_length=10,
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "Parties",
                "ordering": ["display_name"],
                "indexes": [
                    models.Index(
                        fields=["party_type", "display_name"],
                        name="parties_type_name_idx",
                    ),
                ],
            },
        ),
    ]
