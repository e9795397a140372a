# accounting/tests/test_account_resolver_fx.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounting.models.account import Account
from accounting.models.chart import ChartOfAccounts
from accounting.models.currency import Currency, ExchangeRate
from accounting.services.account_resolver import (
    account_exists,
    clear_active_chart_cache,
    get_active_chart,
    get_control_account,
    get_opening_balance_accounts,
)
from accounting.services.exceptions import CONFIGURATION_ERROR, AccountResolutionError
from accounting.services.fx_service import resolve_rate
from accounting.tests.utils import create_active_chart, seed_control_accounts


class AccountResolverTests(TestCase):
    def setUp(self):
        clear_active_chart_cache()

    def test_no_active_chart_is_configuration_error(self):
        with self.assertRaises(AccountResolutionError) as ctx:
            get_active_chart()
        self.assertEqual(ctx.exception.code, CONFIGURATION_ERROR)
        self.assertEqual(ctx.exception.status_code, 400)

    def test_activating_a_chart_deactivates_the_others(self):
        first = create_active_chart(code="first", name="First")
        second = create_active_chart(code="second", name="Second")

        first.refresh_from_db()
        self.assertFalse(first.is_active)
        self.assertEqual(get_active_chart(), second)

    def test_missing_control_account_names_the_account(self):
        chart = create_active_chart()
        Account.objects.create(chart=chart, code="1200", name="AR", account_type=Account.ASSET)

        with self.assertRaises(AccountResolutionError) as ctx:
            get_opening_balance_accounts()
        self.assertIn("Accounts Payable", str(ctx.exception))
        self.assertIn("2000", str(ctx.exception))

    def test_resolves_all_control_accounts(self):
        accounts = seed_control_accounts()
        resolved = get_opening_balance_accounts()

        self.assertEqual(resolved.receivable, accounts["1200"])
        self.assertEqual(resolved.payable, accounts["2000"])
        self.assertEqual(resolved.equity, accounts["3000"])
        self.assertTrue(account_exists(resolved.equity.pk))
        self.assertFalse(account_exists(None))

    @override_settings(ACCOUNTING_CONTROL_ACCOUNTS={"AR": "1300"})
    def test_control_codes_are_configurable(self):
        chart = create_active_chart()
        custom = Account.objects.create(
            chart=chart, code="1300", name="Trade Debtors", account_type=Account.ASSET
        )
        self.assertEqual(get_control_account("AR"), custom)

    def test_unknown_key_rejected(self):
        with self.assertRaises(AccountResolutionError):
            get_control_account("CASH")


@override_settings(BASE_CURRENCY="AED")
class ExchangeRateResolverTests(TestCase):
    def test_base_currency_is_one(self):
        self.assertEqual(resolve_rate("AED", date(2026, 1, 1)), Decimal("1.000000"))
        self.assertEqual(resolve_rate("", None), Decimal("1.000000"))

    def test_unknown_currency_is_none(self):
        self.assertIsNone(resolve_rate("XYZ", date(2026, 1, 1)))

    def test_fixed_conversion_rate_wins(self):
        Currency.objects.create(code="usd", conversion_rate=Decimal("3.672500"))
        self.assertEqual(resolve_rate("USD", date(2026, 1, 1)), Decimal("3.672500"))

    def test_latest_dated_rate_on_or_before_date(self):
        eur = Currency.objects.create(code="EUR")
        ExchangeRate.objects.create(currency=eur, effective_from=date(2025, 12, 1), rate_to_base=Decimal("3.9"))
        ExchangeRate.objects.create(currency=eur, effective_from=date(2026, 2, 1), rate_to_base=Decimal("4.1"))

        self.assertEqual(resolve_rate("EUR", date(2026, 1, 15)), Decimal("3.900000"))
        self.assertEqual(resolve_rate("EUR", date(2026, 2, 1)), Decimal("4.100000"))
        self.assertIsNone(resolve_rate("EUR", date(2025, 1, 1)))


class SeedCommandTests(TestCase):
    def test_seed_creates_active_chart_accounts_and_currency(self):
        call_command("seed_opening_balance_accounts", stdout=StringIO())
        call_command("seed_opening_balance_accounts", stdout=StringIO())

        chart = ChartOfAccounts.objects.get(is_active=True)
        self.assertEqual(
            set(chart.accounts.values_list("code", flat=True)),
            {"1200", "2000", "3000"},
        )
        self.assertTrue(Currency.objects.filter(code="AED").exists())
        self.assertEqual(get_opening_balance_accounts().equity.name, "Opening Balance Equity")


class ActiveChartAccountsApiTests(TestCase):
    def setUp(self):
        seed_control_accounts()
        User = get_user_model()
        user = User.objects.create_user(username="accountant", password="pass12345")
        user.user_permissions.add(
            Permission.objects.get(content_type__app_label="accounting", codename="view_account")
        )
        self.client = APIClient()
        self.client.force_authenticate(user=User.objects.get(pk=user.pk))

    def test_lists_active_chart_with_normal_side(self):
        res = self.client.get("/api/accounting/accounts/")

        self.assertEqual(res.status_code, 200)
        rows = {r["code"]: r for r in res.data}
        self.assertEqual(set(rows), {"1200", "2000", "3000"})
        self.assertEqual(rows["1200"]["normal_side"], Account.DEBIT)
        self.assertEqual(rows["2000"]["normal_side"], Account.CREDIT)
        self.assertEqual(rows["3000"]["account_type_name"], "Equity")

    def test_requires_view_permission(self):
        self.client.force_authenticate(
            user=get_user_model().objects.create_user(username="nobody", password="pass12345")
        )
        res = self.client.get("/api/accounting/accounts/")

        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["code"], "PERMISSION_DENIED")


class HealthCheckTests(TestCase):
    def setUp(self):
        clear_active_chart_cache()
        self.client = APIClient()

    def test_reports_missing_posting_accounts_without_failing(self):
        res = self.client.get("/api/health/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["db"], "ok")
        self.assertEqual(res.data["status"], "degraded")
        self.assertEqual(res.data["posting_accounts"], "missing")

    def test_ok_once_control_accounts_exist(self):
        seed_control_accounts()
        res = self.client.get("/api/health/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(
            res.data, {"status": "ok", "db": "ok", "posting_accounts": "ok"}
        )
