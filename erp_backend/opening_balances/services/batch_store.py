# PATH: opening_balances/services/batch_store.py

"""
OPENING BALANCE BATCH STORE

Responsibilities:
- Validate + normalize payloads using domain rules (re-validated here even
  when the API already did it)
- Enforce write-time references: every party must exist in the directory,
  every non-base line must carry (or resolve) a positive exchange rate
- Allocate batch numbers: <PREFIX>-<YY>-<MM><SEQ4>, sequence scoped to the
  creation year
- Persist header + lines (lines are always fully replaced)
- Append history for every write

No HTTP, no DRF serializers here.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from accounting.models.currency import Currency
from accounting.services.fx_service import base_currency_code, resolve_rate
from accounting.services.numbering import create_with_unique_number, max_sequence
from history.services import append_history, diff_snapshots
from opening_balances.domain import (
    OpeningBalanceError,
    OpeningBalanceLineInput,
    OpeningBalancePayload,
)
from opening_balances.models import OpeningBalanceBatch, OpeningBalanceLine
from opening_balances.services.exceptions import (
    BatchNotFoundError,
    OpeningBalanceValidationError,
)
from parties.services.directory import missing_parties

logger = logging.getLogger(__name__)

HISTORY_MODULE = "opening_balance"
SEQ_WIDTH = 4

HEADER_DIFF_FIELDS = ("opening_date", "notes", "status")


def _actor(user):
    return user if getattr(user, "pk", None) else None


# ------------------------------------------------------------
# BATCH NUMBERS
# ------------------------------------------------------------


def batch_prefix() -> str:
    return (getattr(settings, "OPENING_BALANCE_BATCH_PREFIX", "") or "OB").strip()


def next_batch_number(today: date) -> str:
    year_prefix = f"{batch_prefix()}-{today:%y}-"
    pattern = re.compile(rf"^{re.escape(year_prefix)}\d{{2}}(?P<seq>\d{{{SEQ_WIDTH},}})$")
    existing = OpeningBalanceBatch.objects.filter(batch_no__startswith=year_prefix).values_list(
        "batch_no", flat=True
    )
    seq = max_sequence(existing, pattern) + 1
    return f"{year_prefix}{today:%m}{seq:0{SEQ_WIDTH}d}"


# ------------------------------------------------------------
# VALIDATION
# ------------------------------------------------------------


def validate_payload(*, opening_date, notes, lines) -> OpeningBalancePayload:
    """
    Domain validation + write-time reference checks.

    Returns a payload whose lines all carry an exchange rate.
    """
    try:
        payload = OpeningBalancePayload.from_raw(
            opening_date=opening_date,
            notes=notes,
            raw_lines=lines,
            base_currency=base_currency_code(),
        )
    except OpeningBalanceError as exc:
        raise OpeningBalanceValidationError(str(exc)) from exc

    missing = missing_parties(line.key for line in payload.lines)
    if missing:
        party_type, party_id = missing[0]
        raise OpeningBalanceValidationError(
            f"{party_type.title()} {party_id} does not exist or is inactive"
        )

    resolved: list[OpeningBalanceLineInput] = []
    for line in payload.lines:
        if line.fx_rate_to_base is None:
            rate = resolve_rate(line.currency_code, payload.opening_date)
            if rate is None or rate <= 0:
                raise OpeningBalanceValidationError(
                    f"Exchange rate is required for currency {line.currency_code}"
                )
            try:
                line = line.with_rate(rate)
                line.check_base_amounts()
            except OpeningBalanceError as exc:
                raise OpeningBalanceValidationError(str(exc)) from exc
        resolved.append(line)

    return payload.with_lines(resolved)


def _insert_lines(batch: OpeningBalanceBatch, payload: OpeningBalancePayload) -> int:
    codes = {line.currency_code for line in payload.lines}
    currency_ids = dict(Currency.objects.filter(code__in=codes).values_list("code", "id"))

    rows = [
        OpeningBalanceLine(
            batch=batch,
            party_type=line.party_type.value,
            party_id=line.party_id,
            currency_id=currency_ids.get(line.currency_code),
            currency_code=line.currency_code,
            fx_rate_to_base=line.fx_rate_to_base,
            debit_foreign=line.debit_foreign,
            credit_foreign=line.credit_foreign,
            debit_base=line.debit_base,
            credit_base=line.credit_base,
            notes=line.notes,
        )
        for line in payload.lines
    ]
    OpeningBalanceLine.objects.bulk_create(rows)
    return len(rows)


def _header_snapshot(opening_date, notes, status) -> dict:
    return {"opening_date": opening_date, "notes": notes, "status": status}


# ------------------------------------------------------------
# WRITES
# ------------------------------------------------------------


@transaction.atomic
def create_batch(
    *,
    opening_date,
    notes,
    lines,
    acting_user,
    company_id: int | None = None,
    today: date | None = None,
) -> OpeningBalanceBatch:
    payload = validate_payload(opening_date=opening_date, notes=notes, lines=lines)

    today = today or timezone.localdate()
    if company_id is None:
        company_id = getattr(settings, "DEFAULT_COMPANY_ID", None)
    user = _actor(acting_user)

    def _create(batch_no: str) -> OpeningBalanceBatch:
        return OpeningBalanceBatch.objects.create(
            company_id=company_id,
            batch_no=batch_no,
            opening_date=payload.opening_date,
            notes=payload.notes,
            status=OpeningBalanceBatch.STATUS_DRAFT,
            created_by=user,
        )

    batch = create_with_unique_number(
        generate=lambda: next_batch_number(today),
        create=_create,
        is_taken=lambda n: OpeningBalanceBatch.objects.filter(batch_no=n).exists(),
        label="opening balance batch",
    )

    line_count = _insert_lines(batch, payload)

    append_history(
        module=HISTORY_MODULE,
        module_id=batch.pk,
        user=user,
        action="CREATED",
        details={"batch_no": batch.batch_no, "opening_date": payload.opening_date},
    )

    logger.info(
        "Opening balance batch created",
        extra={"batch_id": batch.pk, "batch_no": batch.batch_no, "lines": line_count},
    )
    return batch


@transaction.atomic
def update_batch(
    *,
    batch_id,
    opening_date,
    notes,
    lines,
    acting_user,
) -> OpeningBalanceBatch:
    """
    Replace header fields and all lines. Allowed in Draft / Submitted /
    Rejected; status always returns to Draft.
    """
    batch = (
        OpeningBalanceBatch.objects.select_for_update()
        .filter(pk=batch_id, status__in=OpeningBalanceBatch.EDITABLE_STATUSES)
        .first()
    )
    if batch is None:
        raise BatchNotFoundError("Opening balance batch not found or not in an editable status")

    payload = validate_payload(opening_date=opening_date, notes=notes, lines=lines)
    user = _actor(acting_user)

    before = _header_snapshot(batch.opening_date, batch.notes, batch.status)
    lines_before = batch.lines.count()

    updated = OpeningBalanceBatch.objects.filter(pk=batch.pk, status=batch.status).update(
        opening_date=payload.opening_date,
        notes=payload.notes,
        status=OpeningBalanceBatch.STATUS_DRAFT,
        updated_by=user,
        updated_at=timezone.now(),
    )
    if updated != 1:
        raise BatchNotFoundError("Opening balance batch not found or not in an editable status")

    OpeningBalanceLine.objects.filter(batch_id=batch.pk).delete()
    lines_after = _insert_lines(batch, payload)

    after = _header_snapshot(payload.opening_date, payload.notes, OpeningBalanceBatch.STATUS_DRAFT)

    append_history(
        module=HISTORY_MODULE,
        module_id=batch.pk,
        user=user,
        action="UPDATED",
        details={
            "batch_no": batch.batch_no,
            "opening_date": payload.opening_date,
            "changes": diff_snapshots(before, after, HEADER_DIFF_FIELDS),
            "line_count": {"from": lines_before, "to": lines_after},
        },
    )

    logger.info(
        "Opening balance batch updated",
        extra={"batch_id": batch.pk, "batch_no": batch.batch_no, "lines": lines_after},
    )

    batch.refresh_from_db()
    return batch


@transaction.atomic
def cancel_batch(*, batch_id, acting_user) -> str:
    """
    Hard-delete a Draft batch and its lines. History rows outlive the batch.

    A batch that was reopened through an edit request still owns a posted
    journal; it cannot be cancelled, only corrected and re-approved.
    """
    batch = (
        OpeningBalanceBatch.objects.select_for_update()
        .filter(pk=batch_id, status=OpeningBalanceBatch.STATUS_DRAFT)
        .first()
    )
    if batch is None:
        raise BatchNotFoundError("Opening balance batch not found or not in Draft status")

    if batch.gl_journal_id is not None:
        raise OpeningBalanceValidationError(
            "Batch has a posted journal; correct and resubmit it instead of cancelling"
        )

    batch_no = batch.batch_no
    _, deleted = OpeningBalanceBatch.objects.filter(
        pk=batch.pk, status=OpeningBalanceBatch.STATUS_DRAFT
    ).delete()
    if deleted.get(OpeningBalanceBatch._meta.label, 0) != 1:
        raise BatchNotFoundError("Opening balance batch not found or not in Draft status")

    append_history(
        module=HISTORY_MODULE,
        module_id=batch_id,
        user=_actor(acting_user),
        action="CANCELLED",
        details={"batch_no": batch_no},
    )

    logger.info("Opening balance batch cancelled", extra={"batch_id": batch_id, "batch_no": batch_no})
    return batch_no
