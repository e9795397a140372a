# opening_balances/tests/utils.py

from __future__ import annotations

from datetime import date

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission

from parties.models import Party

OPENING_DATE = date(2026, 1, 1)
TODAY = date(2026, 3, 5)

ALL_BATCH_PERMS = (
    "view_openingbalancebatch",
    "add_openingbalancebatch",
    "change_openingbalancebatch",
    "delete_openingbalancebatch",
    "submit_openingbalancebatch",
    "approve_openingbalancebatch",
)


def make_user(username: str = "clerk", perms=()):
    user = get_user_model().objects.create_user(username=username, password="pass12345")
    if perms:
        user.user_permissions.add(
            *Permission.objects.filter(
                content_type__app_label="opening_balances", codename__in=perms
            )
        )
    # Fresh instance: has_perm caches per object
    return get_user_model().objects.get(pk=user.pk)


def make_customer(name: str = "Acme Trading", **kwargs) -> Party:
    return Party.objects.create(party_type=Party.CUSTOMER, display_name=name, **kwargs)


def make_supplier(name: str = "Globex Supplies", **kwargs) -> Party:
    return Party.objects.create(party_type=Party.SUPPLIER, display_name=name, **kwargs)


def line(party: Party, debit="0", credit="0", **extra) -> dict:
    row = {
        "party_type": party.party_type,
        "party_id": party.pk,
        "debit_foreign": debit,
        "credit_foreign": credit,
    }
    row.update(extra)
    return row
