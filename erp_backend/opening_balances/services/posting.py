# PATH: opening_balances/services/posting.py

"""
OPENING BALANCE POSTING

Turns batch lines into GL postings and writes the journal.

Per line, net = debit_base - credit_base (base currency). Lines with
|net| < 0.01 produce nothing.

    Customer  net > 0  Dr AR      / Cr Equity
    Customer  net < 0  Dr Equity  / Cr AR      (credit sits inside AR)
    Supplier  net > 0  Dr AP      / Cr Equity  (debit sits inside AP)
    Supplier  net < 0  Dr Equity  / Cr AP

Every pair adds the same amount to both sides, so the journal balances by
construction. Customers are processed first, then suppliers, each by
party_id, so identical input always yields identical journal lines.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from accounting.models.journal import JournalEntry
from accounting.services.account_resolver import ControlAccounts
from accounting.services.fx_service import base_currency_code, get_currency
from accounting.services.journal_entry_service import (
    create_journal_entry,
    invalidate_journal,
    mark_superseded,
)
from opening_balances.models import OpeningBalanceBatch, OpeningBalanceLine

logger = logging.getLogger(__name__)

SOURCE_TYPE = "OPENING_BALANCE"

TWOPLACES = Decimal("0.01")
MIN_NET = Decimal("0.01")

PARTY_ORDER = {
    OpeningBalanceLine.PARTY_CUSTOMER: 0,
    OpeningBalanceLine.PARTY_SUPPLIER: 1,
}

PARTY_LABELS = {
    OpeningBalanceLine.PARTY_CUSTOMER: "Customer",
    OpeningBalanceLine.PARTY_SUPPLIER: "Supplier",
}


def _posting(account, *, debit=Decimal("0.00"), credit=Decimal("0.00"), line) -> dict:
    return {
        "account": account,
        "debit": debit,
        "credit": credit,
        "description": f"Opening Balance - {PARTY_LABELS[line.party_type]} {line.party_id}",
        "entity_type": line.party_type,
        "entity_id": line.party_id,
    }


def build_journal_lines(
    lines: Iterable[OpeningBalanceLine],
    accounts: ControlAccounts,
) -> tuple[list[dict], Decimal]:
    """
    Pure: no queries. Returns (postings, total) where total is the debit
    (== credit) side of the journal.
    """
    postings: list[dict] = []
    total = Decimal("0.00")

    ordered = sorted(lines, key=lambda l: (PARTY_ORDER.get(l.party_type, 99), l.party_id))

    for line in ordered:
        net = line.net_base
        if abs(net) < MIN_NET:
            continue

        amount = abs(net).quantize(TWOPLACES, rounding=ROUND_HALF_UP)

        if line.party_type == OpeningBalanceLine.PARTY_CUSTOMER:
            control = accounts.receivable
        elif line.party_type == OpeningBalanceLine.PARTY_SUPPLIER:
            control = accounts.payable
        else:
            continue

        if net > 0:
            postings.append(_posting(control, debit=amount, line=line))
            postings.append(_posting(accounts.equity, credit=amount, line=line))
        else:
            postings.append(_posting(accounts.equity, debit=amount, line=line))
            postings.append(_posting(control, credit=amount, line=line))

        total += amount

    return postings, total


def post_opening_balance(
    batch: OpeningBalanceBatch,
    postings: list[dict],
    *,
    acting_user=None,
) -> JournalEntry:
    """
    Write the journal for an approved batch. Must run inside the caller's
    transaction.

    A previously linked journal is invalidated first (never deleted) and
    pointed at its replacement.
    """
    previous_id = batch.gl_journal_id
    if previous_id is not None:
        invalidate_journal(previous_id)

    journal = create_journal_entry(
        source_type=SOURCE_TYPE,
        source_id=batch.pk,
        source_name=batch.batch_no,
        journal_date=batch.opening_date,
        memo=f"Opening Balance Batch {batch.batch_no}",
        postings=postings,
        created_by=acting_user if getattr(acting_user, "pk", None) else None,
        currency=get_currency(base_currency_code()),
        exchange_rate=Decimal("1.000000"),
    )

    OpeningBalanceBatch.objects.filter(pk=batch.pk).update(gl_journal=journal)

    if previous_id is not None:
        mark_superseded(previous_id, superseded_by=journal)

    logger.info(
        "Opening balance journal posted",
        extra={
            "batch_id": batch.pk,
            "batch_no": batch.batch_no,
            "journal_id": journal.pk,
            "journal_number": journal.journal_number,
            "superseded_journal_id": previous_id,
        },
    )
    return journal
