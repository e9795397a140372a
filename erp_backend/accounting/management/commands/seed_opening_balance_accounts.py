# accounting/management/commands/seed_opening_balance_accounts.py

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from accounting.models.account import Account
from accounting.models.chart import ChartOfAccounts
from accounting.models.currency import Currency
from accounting.services.account_resolver import (
    AP,
    AR,
    EQUITY,
    clear_active_chart_cache,
    control_account_codes,
)
from accounting.services.fx_service import base_currency_code

DEFAULT_CHART_CODE = "general_standard"
DEFAULT_CHART_NAME = "General Standard Chart"


def _activate_only_this_chart(chart: ChartOfAccounts) -> None:
    ChartOfAccounts.objects.exclude(id=chart.id).filter(is_active=True).update(
        is_active=False
    )
    if not chart.is_active:
        chart.is_active = True
        chart.save(update_fields=["is_active"])
    clear_active_chart_cache()


def control_account_rows() -> list[tuple[str, str, str]]:
    codes = control_account_codes()
    return [
        (codes[AR], "AR Control", Account.ASSET),
        (codes[AP], "AP Control", Account.LIABILITY),
        (codes[EQUITY], "Opening Balance Equity", Account.EQUITY),
    ]


class Command(BaseCommand):
    help = (
        "Seed the active Chart of Accounts with the control accounts opening "
        "balances post to (AR, AP, Opening Balance Equity) plus the base currency"
    )

    def add_arguments(self, parser):
        parser.add_argument("--chart-code", default=DEFAULT_CHART_CODE)
        parser.add_argument("--chart-name", default=DEFAULT_CHART_NAME)

    @transaction.atomic
    def handle(self, *args, **options):
        chart_code = options["chart_code"].strip()
        chart_name = options["chart_name"].strip()

        self.stdout.write(f"Seeding chart '{chart_code}'...")

        chart = ChartOfAccounts.objects.filter(code=chart_code).first()
        if chart is None:
            chart = ChartOfAccounts.objects.create(
                name=chart_name,
                code=chart_code,
                business_type=ChartOfAccounts.BUSINESS_GENERAL,
                is_active=True,
            )
            self.stdout.write("Created chart")
        else:
            self.stdout.write("Chart already exists")

        _activate_only_this_chart(chart)

        created_count = 0
        updated_count = 0

        for code, name, account_type in control_account_rows():
            acc, acc_created = Account.objects.get_or_create(
                chart=chart,
                code=code,
                defaults={
                    "name": name,
                    "account_type": account_type,
                    "is_active": True,
                },
            )

            if acc_created:
                created_count += 1
                continue

            needs_update = False
            if acc.account_type != account_type:
                acc.account_type = account_type
                needs_update = True
            if not acc.is_active:
                acc.is_active = True
                needs_update = True

            if needs_update:
                acc.save(update_fields=["account_type", "is_active"])
                updated_count += 1

        base = base_currency_code()
        _, currency_created = Currency.objects.get_or_create(
            code=base,
            defaults={"name": base, "is_active": True},
        )
        if currency_created:
            self.stdout.write(f"Created base currency {base}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Opening balance accounts seeded in '{chart.code}' "
                f"({created_count} new accounts, {updated_count} updated; "
                f"company {settings.DEFAULT_COMPANY_ID})."
            )
        )
