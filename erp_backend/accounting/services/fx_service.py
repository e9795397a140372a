# PATH: accounting/services/fx_service.py

"""
EXCHANGE RATE RESOLVER

resolve_rate(currency_code, on_date) -> Decimal | None

Lookup order:
1. base currency -> 1
2. Currency.conversion_rate (fixed company rate), when set
3. latest ExchangeRate with effective_from <= on_date
4. None (caller decides; opening balances reject the line)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.conf import settings

from accounting.models.currency import Currency, ExchangeRate

ONE = Decimal("1.000000")


def base_currency_code() -> str:
    return (getattr(settings, "BASE_CURRENCY", "") or "AED").strip().upper()


def is_base_currency(currency_code: str | None) -> bool:
    code = (currency_code or "").strip().upper()
    return not code or code == base_currency_code()


def get_currency(currency_code: str | None) -> Currency | None:
    code = (currency_code or "").strip().upper()
    if not code:
        return None
    return Currency.objects.filter(code=code).first()


def resolve_rate(currency_code: str | None, on_date: date | None) -> Decimal | None:
    if is_base_currency(currency_code):
        return ONE

    currency = get_currency(currency_code)
    if currency is None:
        return None

    if currency.conversion_rate and currency.conversion_rate > 0:
        return currency.conversion_rate

    qs = ExchangeRate.objects.filter(currency=currency)
    if on_date is not None:
        qs = qs.filter(effective_from__lte=on_date)

    rate = qs.order_by("-effective_from").values_list("rate_to_base", flat=True).first()
    return rate if rate and rate > 0 else None
