# parties/services/directory.py

"""
PARTY DIRECTORY LOOKUPS

- party_exists(party_type, party_id): write-time guard used by opening balances
- display_names(keys): bulk name lookup for read models
- search_parties(party_type, q): picker search (active only, max 50)
"""

from __future__ import annotations

from typing import Iterable

from django.db.models import Q

from parties.models import Party

SEARCH_LIMIT = 50


def party_exists(party_type: str, party_id) -> bool:
    if party_id in (None, ""):
        return False
    return Party.objects.filter(
        pk=party_id,
        party_type=(party_type or "").strip().upper(),
        is_active=True,
    ).exists()


def missing_parties(keys: Iterable[tuple[str, int]]) -> list[tuple[str, int]]:
    """
    Return the (party_type, party_id) keys with no active party, preserving
    input order. One query per party type.
    """
    keys = list(keys)
    wanted: dict[str, set] = {}
    for party_type, party_id in keys:
        wanted.setdefault(party_type, set()).add(party_id)

    found = set()
    for party_type, ids in wanted.items():
        for pk in Party.objects.filter(
            party_type=party_type, pk__in=ids, is_active=True
        ).values_list("pk", flat=True):
            found.add((party_type, pk))

    return [key for key in keys if key not in found]


def display_names(keys: Iterable[tuple[str, int]]) -> dict[tuple[str, int], str]:
    ids = {party_id for _, party_id in keys}
    rows = Party.objects.filter(pk__in=ids).values_list("pk", "party_type", "display_name")
    return {(party_type, pk): name for pk, party_type, name in rows}


def search_parties(party_type: str, q: str = "", limit: int = SEARCH_LIMIT):
    qs = Party.objects.filter(party_type=party_type, is_active=True)
    q = (q or "").strip()
    if q:
        qs = qs.filter(Q(display_name__icontains=q) | Q(email__icontains=q))
    return qs.order_by("display_name")[:limit]
