# PATH: opening_balances/services/workflow.py

"""
OPENING BALANCE WORKFLOW (STATUS MACHINE)

    Draft(3) --submit--> Submitted(8) --approve--> Approved(1)  [posts GL]
                                      --reject---> Rejected(2)
    Approved --request_edit--> edit Pending
             --decide(approve)--> Draft, edit Approved
             --decide(reject)---> edit Rejected

Rules:
- Every transition is a conditional UPDATE on the expected state; 0 rows
  means someone else moved the batch first and the call fails.
- Approval claims the transition BEFORE writing the journal, so two
  concurrent approvals produce exactly one journal.
- The journal is built from the lines read after that claim.
- Transition + posting + history share one transaction.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from accounting.services.account_resolver import get_opening_balance_accounts
from history.services import append_history
from opening_balances.models import OpeningBalanceBatch
from opening_balances.services.batch_store import HISTORY_MODULE
from opening_balances.services.exceptions import (
    BatchNotFoundError,
    OpeningBalanceValidationError,
)
from opening_balances.services.posting import build_journal_lines, post_opening_balance

logger = logging.getLogger(__name__)

DECISION_APPROVE = "approve"
DECISION_REJECT = "reject"
DECISIONS = (DECISION_APPROVE, DECISION_REJECT)


def _actor(user):
    return user if getattr(user, "pk", None) else None


def _clean_text(value) -> str:
    return str(value or "").strip()


def _transition(batch_id, *, where: dict, changes: dict, exclude: dict | None = None) -> bool:
    """
    UPDATE batch SET <changes> WHERE id=<batch_id> AND <where> [AND NOT <exclude>].
    Returns True only if exactly one row moved.
    """
    qs = OpeningBalanceBatch.objects.filter(pk=batch_id, **where)
    if exclude:
        qs = qs.exclude(**exclude)
    return qs.update(updated_at=timezone.now(), **changes) == 1


def _get_batch(batch_id) -> OpeningBalanceBatch | None:
    return OpeningBalanceBatch.objects.filter(pk=batch_id).first()


# ------------------------------------------------------------
# SUBMIT
# ------------------------------------------------------------


@transaction.atomic
def submit(*, batch_id, acting_user) -> OpeningBalanceBatch:
    user = _actor(acting_user)

    moved = _transition(
        batch_id,
        where={"status": OpeningBalanceBatch.STATUS_DRAFT},
        changes={"status": OpeningBalanceBatch.STATUS_SUBMITTED, "updated_by": user},
    )
    if not moved:
        raise BatchNotFoundError("Opening balance batch not found or not in Draft status")

    append_history(
        module=HISTORY_MODULE,
        module_id=batch_id,
        user=user,
        action="SUBMITTED",
        details={
            "previous_status": OpeningBalanceBatch.STATUS_DRAFT,
            "new_status": OpeningBalanceBatch.STATUS_SUBMITTED,
        },
    )

    logger.info("Opening balance batch submitted", extra={"batch_id": batch_id})
    return _get_batch(batch_id)


# ------------------------------------------------------------
# APPROVE / REJECT
# ------------------------------------------------------------


@transaction.atomic
def approve(*, batch_id, acting_user, comment=None):
    """
    Submitted -> Approved, posting the GL journal.

    Header and lines are read after the transition is claimed; a failure
    after the claim rolls it back.

    Returns (batch, journal).
    """
    user = _actor(acting_user)
    comment = _clean_text(comment)

    batch = (
        OpeningBalanceBatch.objects.select_for_update()
        .filter(pk=batch_id, status=OpeningBalanceBatch.STATUS_SUBMITTED)
        .first()
    )
    if batch is None:
        raise BatchNotFoundError("Opening balance batch not found or not in Submitted status")

    accounts = get_opening_balance_accounts()

    now = timezone.now()
    moved = _transition(
        batch.pk,
        where={"status": OpeningBalanceBatch.STATUS_SUBMITTED},
        changes={
            "status": OpeningBalanceBatch.STATUS_APPROVED,
            "approved_by": user,
            "approved_at": now,
            "edit_request_status": OpeningBalanceBatch.EDIT_NONE,
            "updated_by": user,
        },
    )
    if not moved:
        logger.warning(
            "Opening balance approval lost race",
            extra={"batch_id": batch.pk, "batch_no": batch.batch_no},
        )
        raise BatchNotFoundError("Opening balance batch not found or not in Submitted status")

    batch.refresh_from_db()
    postings, total = build_journal_lines(batch.lines.all(), accounts)
    if not postings:
        raise OpeningBalanceValidationError("No valid opening balance lines to post")

    journal = post_opening_balance(batch, postings, acting_user=user)

    append_history(
        module=HISTORY_MODULE,
        module_id=batch.pk,
        user=user,
        action="APPROVED",
        details={"gl_journal_id": journal.pk, "comment": comment or None},
    )

    logger.info(
        "Opening balance batch approved",
        extra={
            "batch_id": batch.pk,
            "batch_no": batch.batch_no,
            "journal_id": journal.pk,
            "total": str(total),
        },
    )

    batch.refresh_from_db()
    return batch, journal


@transaction.atomic
def reject(*, batch_id, acting_user, reason) -> OpeningBalanceBatch:
    reason = _clean_text(reason)
    if not reason:
        raise OpeningBalanceValidationError("Rejection reason is required")

    user = _actor(acting_user)

    moved = _transition(
        batch_id,
        where={"status": OpeningBalanceBatch.STATUS_SUBMITTED},
        changes={"status": OpeningBalanceBatch.STATUS_REJECTED, "updated_by": user},
    )
    if not moved:
        raise BatchNotFoundError("Opening balance batch not found or not in Submitted status")

    append_history(
        module=HISTORY_MODULE,
        module_id=batch_id,
        user=user,
        action="REJECTED",
        details={"reason": reason},
    )

    logger.info("Opening balance batch rejected", extra={"batch_id": batch_id})
    return _get_batch(batch_id)


# ------------------------------------------------------------
# EDIT REQUESTS
# ------------------------------------------------------------


@transaction.atomic
def request_edit(*, batch_id, acting_user, reason) -> OpeningBalanceBatch:
    reason = _clean_text(reason)
    if not reason:
        raise OpeningBalanceValidationError("Edit request reason is required")

    batch = _get_batch(batch_id)
    if batch is None:
        raise BatchNotFoundError("Opening balance batch not found")

    if batch.status != OpeningBalanceBatch.STATUS_APPROVED:
        raise OpeningBalanceValidationError("Edit can only be requested for approved batches")

    if batch.edit_request_status == OpeningBalanceBatch.EDIT_PENDING:
        raise OpeningBalanceValidationError("An edit request is already pending for this batch")

    user = _actor(acting_user)

    moved = _transition(
        batch.pk,
        where={"status": OpeningBalanceBatch.STATUS_APPROVED},
        exclude={"edit_request_status": OpeningBalanceBatch.EDIT_PENDING},
        changes={
            "edit_request_status": OpeningBalanceBatch.EDIT_PENDING,
            "edit_requested_by": user,
            "edit_requested_at": timezone.now(),
            "edit_request_reason": reason,
            "edit_approved_by": None,
            "edit_approved_at": None,
            "edit_rejection_reason": "",
        },
    )
    if not moved:
        raise OpeningBalanceValidationError("An edit request is already pending for this batch")

    append_history(
        module=HISTORY_MODULE,
        module_id=batch.pk,
        user=user,
        action="EDIT_REQUESTED",
        details={"reason": reason},
    )

    logger.info("Opening balance edit requested", extra={"batch_id": batch.pk})
    return _get_batch(batch.pk)


@transaction.atomic
def decide_edit_request(*, batch_id, acting_user, decision, reason=None) -> OpeningBalanceBatch:
    """
    approve: edit Pending -> Approved, status Approved -> Draft (batch
             becomes editable; its journal stays active until re-approval)
    reject:  edit Pending -> Rejected, reason required
    """
    decision = _clean_text(decision).lower()
    if decision not in DECISIONS:
        raise OpeningBalanceValidationError("Decision must be 'approve' or 'reject'")

    reason = _clean_text(reason)
    if decision == DECISION_REJECT and not reason:
        raise OpeningBalanceValidationError("Rejection reason is required")

    batch = _get_batch(batch_id)
    if batch is None:
        raise BatchNotFoundError("Opening balance batch not found")

    if batch.edit_request_status != OpeningBalanceBatch.EDIT_PENDING:
        raise OpeningBalanceValidationError("No pending edit request for this batch")

    user = _actor(acting_user)
    now = timezone.now()
    pending = {
        "status": OpeningBalanceBatch.STATUS_APPROVED,
        "edit_request_status": OpeningBalanceBatch.EDIT_PENDING,
    }

    if decision == DECISION_APPROVE:
        changes = {
            "status": OpeningBalanceBatch.STATUS_DRAFT,
            "edit_request_status": OpeningBalanceBatch.EDIT_APPROVED,
            "edit_approved_by": user,
            "edit_approved_at": now,
            "updated_by": user,
        }
        action = "EDIT_REQUEST_APPROVED"
        details = {"comment": reason or None}
    else:
        changes = {
            "edit_request_status": OpeningBalanceBatch.EDIT_REJECTED,
            "edit_approved_by": user,
            "edit_approved_at": now,
            "edit_rejection_reason": reason,
            "updated_by": user,
        }
        action = "EDIT_REQUEST_REJECTED"
        details = {"reason": reason}

    if not _transition(batch.pk, where=pending, changes=changes):
        raise OpeningBalanceValidationError("No pending edit request for this batch")

    append_history(
        module=HISTORY_MODULE,
        module_id=batch.pk,
        user=user,
        action=action,
        details=details,
    )

    logger.info(
        "Opening balance edit request decided",
        extra={"batch_id": batch.pk, "decision": decision},
    )
    return _get_batch(batch.pk)
