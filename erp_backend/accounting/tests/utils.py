# accounting/tests/utils.py

"""
Shared fixtures for tests that post to the ledger.

Charts are always created through ChartOfAccounts.save() so the cached
active-chart lookup is reset between tests.
"""

from __future__ import annotations

from accounting.models.account import Account
from accounting.models.chart import ChartOfAccounts
from accounting.services.account_resolver import clear_active_chart_cache

CONTROL_ACCOUNTS = [
    ("1200", "AR Control", Account.ASSET),
    ("2000", "AP Control", Account.LIABILITY),
    ("3000", "Opening Balance Equity", Account.EQUITY),
]


def create_active_chart(code: str = "test_chart", name: str = "Test Chart") -> ChartOfAccounts:
    clear_active_chart_cache()
    chart = ChartOfAccounts.objects.filter(code=code).first()
    if chart is None:
        chart = ChartOfAccounts(code=code, name=name)
    chart.is_active = True
    chart.save()
    return chart


def ensure_account(chart, code: str, name: str, account_type: str = Account.ASSET) -> Account:
    acc, _ = Account.objects.get_or_create(
        chart=chart,
        code=code,
        defaults={"name": name, "account_type": account_type, "is_active": True},
    )
    return acc


def seed_control_accounts(chart=None) -> dict[str, Account]:
    chart = chart or create_active_chart()
    return {
        code: ensure_account(chart, code, name, account_type)
        for code, name, account_type in CONTROL_ACCOUNTS
    }
