# opening_balances/apps.py

"""
OPENING BALANCES APP CONFIG

Batch workflow for customer / supplier opening balances:
Draft -> Submitted -> Approved (posted to the GL) | Rejected,
plus edit requests that reopen an approved batch.
"""

from django.apps import AppConfig


class OpeningBalancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "opening_balances"
    verbose_name = "Opening Balances"
