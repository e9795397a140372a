# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.chart import ChartOfAccounts
from accounting.models.currency import Currency, ExchangeRate
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine

__all__ = [
    "ChartOfAccounts",
    "Account",
    "Currency",
    "ExchangeRate",
    "JournalEntry",
    "JournalLine",
]
