# history/apps.py

"""
HISTORY APP CONFIG

Append-only action log shared by every module (opening balances today).
"""

from django.apps import AppConfig


class HistoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "history"
    verbose_name = "History Log"
