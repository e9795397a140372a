# accounting/api/views/__init__.py

"""
accounting.api.views package

Important:
- ViewSets are defined in accounting.api.view (singular) in this codebase.
- Do NOT import accounting.api.urls from here to avoid circular imports.
"""

from accounting.api.view import JournalEntryViewSet, JournalLineViewSet
from accounting.api.views.accounts import ActiveChartAccountsView

__all__ = [
    "JournalEntryViewSet",
    "JournalLineViewSet",
    "ActiveChartAccountsView",
]
