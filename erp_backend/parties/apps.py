# parties/apps.py

"""
PARTIES APP CONFIG

Shared customer / supplier directory. Opening balance lines reference
parties by (party_type, id).
"""

from django.apps import AppConfig


class PartiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "parties"
    verbose_name = "Parties"
