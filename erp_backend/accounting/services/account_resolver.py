# PATH: accounting/services/account_resolver.py

"""
PATH: accounting/services/account_resolver.py

ACCOUNT RESOLVER (AUTHORITATIVE)

This module answers ONE question:
"Which account should be used for this purpose?"

Semantic keys (AR, AP, EQUITY) map to account codes through
settings.ACCOUNTING_CONTROL_ACCOUNTS; codes are looked up in the single
active chart.

Design goals:
- deterministic
- chart-safe
- hard-fail on missing setup (so we never post to the wrong account);
  failures surface as CONFIGURATION_ERROR naming the missing account
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from django.conf import settings
from django.core.exceptions import MultipleObjectsReturned, ObjectDoesNotExist

from accounting.models.account import Account
from accounting.models.chart import ChartOfAccounts
from accounting.services.exceptions import AccountResolutionError

logger = logging.getLogger(__name__)

AR = "AR"
AP = "AP"
EQUITY = "EQUITY"

ACCOUNT_LABELS = {
    AR: "Accounts Receivable",
    AP: "Accounts Payable",
    EQUITY: "Owner's Equity",
}

DEFAULT_CODES = {
    AR: "1200",
    AP: "2000",
    EQUITY: "3000",
}

EXPECTED_TYPES = {
    AR: Account.ASSET,
    AP: Account.LIABILITY,
    EQUITY: Account.EQUITY,
}


@dataclass(frozen=True)
class ControlAccounts:
    receivable: Account
    payable: Account
    equity: Account


def control_account_codes() -> dict:
    configured = getattr(settings, "ACCOUNTING_CONTROL_ACCOUNTS", None) or {}
    return {**DEFAULT_CODES, **configured}


# ------------------------------------------------------------
# ACTIVE CHART
# ------------------------------------------------------------


@lru_cache(maxsize=1)
def get_active_chart() -> ChartOfAccounts:
    """
    Cached resolver for the *single* active chart.

    - exactly one active -> return it
    - none active -> CONFIGURATION_ERROR
    - multiple active -> CONFIGURATION_ERROR

    NOTE:
    ChartOfAccounts.save() clears this cache when the active chart changes.
    """
    try:
        return ChartOfAccounts.objects.get(is_active=True)
    except ObjectDoesNotExist as exc:
        raise AccountResolutionError(
            "No active Chart of Accounts found. Seed one with "
            "`manage.py seed_opening_balance_accounts`."
        ) from exc
    except MultipleObjectsReturned as exc:
        raise AccountResolutionError(
            "Multiple active Charts of Accounts found. Only one active chart is allowed."
        ) from exc


def clear_active_chart_cache() -> None:
    get_active_chart.cache_clear()


# ------------------------------------------------------------
# ACCOUNT LOOKUPS
# ------------------------------------------------------------


def account_exists(account_id) -> bool:
    if account_id in (None, ""):
        return False
    return Account.objects.filter(pk=account_id, is_active=True).exists()


def get_control_account(key: str) -> Account:
    key = (key or "").strip().upper()
    if key not in ACCOUNT_LABELS:
        raise AccountResolutionError(f"Unknown control account key: {key!r}")

    label = ACCOUNT_LABELS[key]
    code = (control_account_codes().get(key) or "").strip()
    if not code:
        raise AccountResolutionError(f"{label} account code is not configured.")

    chart = get_active_chart()

    try:
        account = Account.objects.get(chart=chart, code=code, is_active=True)
    except Account.DoesNotExist as exc:
        logger.error(
            "Control account not found",
            extra={"account_key": key, "account_code": code, "chart": chart.code},
        )
        raise AccountResolutionError(
            f"{label} account (code={code}) not found in active chart ({chart.name})."
        ) from exc

    if account.account_type != EXPECTED_TYPES[key]:
        logger.warning(
            "Control account has unexpected type",
            extra={
                "account_key": key,
                "account_code": code,
                "account_type": account.account_type,
                "expected_type": EXPECTED_TYPES[key],
            },
        )
    return account


def get_accounts_receivable_account() -> Account:
    return get_control_account(AR)


def get_accounts_payable_account() -> Account:
    return get_control_account(AP)


def get_owners_equity_account() -> Account:
    return get_control_account(EQUITY)


def get_opening_balance_accounts() -> ControlAccounts:
    """
    Resolve every account the opening balance posting needs, failing on the
    first one missing.
    """
    return ControlAccounts(
        receivable=get_accounts_receivable_account(),
        payable=get_accounts_payable_account(),
        equity=get_owners_equity_account(),
    )
