# accounting/services/journal_entry_service.py

"""
======================================================
PATH: accounting/services/journal_entry_service.py
======================================================
JOURNAL SERVICE (ACCOUNTING ENGINE)

This module is the ONLY place allowed to:
- Create JournalEntry (GL journal header)
- Create JournalLine
- Enforce debit == credit
- Enforce one active journal per source (prevents double-posting)
- Invalidate (never delete) a journal that has been superseded

Everything else (opening balances, future posting modules) must pass through here.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.services.exceptions import (
    IdempotencyError,
    JournalEntryCreationError,
)
from accounting.services.numbering import create_with_unique_number, max_sequence

TWOPLACES = Decimal("0.01")
MIN_LINE_AMOUNT = Decimal("0.01")

JOURNAL_PREFIX = "JV"
JOURNAL_SEQ_WIDTH = 6


def _money(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise JournalEntryCreationError(f"Invalid money value: {value!r}") from exc

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


# ------------------------------------------------------------
# JOURNAL NUMBERS
# ------------------------------------------------------------


def _journal_prefix(year: int) -> str:
    return f"{JOURNAL_PREFIX}-{year:04d}-"


def next_journal_number(year: int) -> str:
    prefix = _journal_prefix(year)
    pattern = re.compile(rf"^{re.escape(prefix)}(?P<seq>\d+)$")
    existing = JournalEntry.objects.filter(journal_number__startswith=prefix).values_list(
        "journal_number", flat=True
    )
    seq = max_sequence(existing, pattern) + 1
    return f"{prefix}{seq:0{JOURNAL_SEQ_WIDTH}d}"


# ------------------------------------------------------------
# POSTINGS
# ------------------------------------------------------------


def _normalize_postings(postings: list) -> tuple[list[dict], Decimal, Decimal]:
    total_debits = Decimal("0.00")
    total_credits = Decimal("0.00")
    normalized: list[dict] = []

    for line in postings:
        if not isinstance(line, dict):
            raise JournalEntryCreationError("Each posting must be an object/dict")

        account = line.get("account")
        if account is None:
            raise JournalEntryCreationError("Posting missing account")

        if not getattr(account, "is_active", True):
            raise JournalEntryCreationError(
                f"Account {getattr(account, 'code', 'UNKNOWN')} is inactive"
            )

        debit = _money(line.get("debit"))
        credit = _money(line.get("credit"))

        if debit < 0 or credit < 0:
            raise JournalEntryCreationError("Debit or credit cannot be negative")

        if debit > 0 and credit > 0:
            raise JournalEntryCreationError("A posting cannot have both debit and credit")

        if debit == 0 and credit == 0:
            raise JournalEntryCreationError("A posting must have either debit or credit")

        if 0 < debit < MIN_LINE_AMOUNT or 0 < credit < MIN_LINE_AMOUNT:
            raise JournalEntryCreationError(
                f"Posting amount too small: debit={debit} credit={credit}"
            )

        total_debits += debit
        total_credits += credit

        normalized.append(
            {
                "account": account,
                "debit": debit,
                "credit": credit,
                "description": (line.get("description") or "").strip()[:255],
                "entity_type": (line.get("entity_type") or "").strip().upper(),
                "entity_id": str(line.get("entity_id") or "").strip(),
            }
        )

    return (
        normalized,
        total_debits.quantize(TWOPLACES, rounding=ROUND_HALF_UP),
        total_credits.quantize(TWOPLACES, rounding=ROUND_HALF_UP),
    )


@transaction.atomic
def create_journal_entry(
    *,
    source_type: str,
    source_id,
    journal_date: date,
    memo: str,
    postings: list,
    source_name: str = "",
    created_by=None,
    currency=None,
    exchange_rate: Decimal = Decimal("1.000000"),
) -> JournalEntry:
    if not postings:
        raise JournalEntryCreationError("Journal must contain at least one posting")

    memo = (memo or "").strip()
    if not memo:
        raise JournalEntryCreationError("Journal memo is required")

    source_type = (source_type or "").strip().upper()
    source_id = str(source_id or "").strip()
    if not source_type or not source_id:
        raise JournalEntryCreationError("source_type and source_id are required")

    if journal_date is None:
        journal_date = timezone.localdate()

    normalized, total_debits, total_credits = _normalize_postings(postings)

    if total_debits != total_credits:
        raise JournalEntryCreationError(
            f"Journal not balanced: debits={total_debits} credits={total_credits}"
        )

    if JournalEntry.objects.active().for_source(source_type, source_id).exists():
        raise IdempotencyError(
            f"An active journal already exists for {source_type}:{source_id}"
        )

    def _create(number: str) -> JournalEntry:
        return JournalEntry.objects.create(
            journal_number=number,
            journal_date=journal_date,
            source_type=source_type,
            source_id=source_id,
            source_name=(source_name or "")[:100],
            memo=memo,
            currency=currency,
            exchange_rate=exchange_rate,
            total_amount=total_debits,
            created_by=created_by,
        )

    journal = create_with_unique_number(
        generate=lambda: next_journal_number(journal_date.year),
        create=_create,
        is_taken=lambda n: JournalEntry.objects.filter(journal_number=n).exists(),
        label="journal",
    )

    JournalLine.objects.bulk_create(
        [
            JournalLine(
                journal=journal,
                line_no=index,
                account=line["account"],
                debit=line["debit"],
                credit=line["credit"],
                description=line["description"],
                entity_type=line["entity_type"],
                entity_id=line["entity_id"],
            )
            for index, line in enumerate(normalized, start=1)
        ]
    )

    return journal


# ------------------------------------------------------------
# SOFT INVALIDATION
# ------------------------------------------------------------


def invalidate_journal(journal_id) -> bool:
    """
    Mark an active journal as deleted. Returns False if it was already inactive
    (or does not exist). Rows and lines are kept for audit.
    """
    updated = JournalEntry.objects.filter(pk=journal_id, is_deleted=False).update(
        is_deleted=True,
        deleted_at=timezone.now(),
    )
    return updated == 1


def mark_superseded(journal_id, *, superseded_by: JournalEntry) -> None:
    JournalEntry.objects.filter(pk=journal_id, is_deleted=True).update(
        superseded_by=superseded_by
    )
