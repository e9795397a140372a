# opening_balances/tests/test_workflow.py

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.test import TestCase

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.services.account_resolver import get_opening_balance_accounts
from accounting.services.exceptions import AccountResolutionError
from accounting.tests.utils import create_active_chart, ensure_account, seed_control_accounts
from history.services import history_for
from opening_balances.models import OpeningBalanceBatch
from opening_balances.services import workflow
from opening_balances.services.batch_store import (
    HISTORY_MODULE,
    cancel_batch,
    create_batch,
    update_batch,
)
from opening_balances.services.exceptions import (
    BatchNotFoundError,
    OpeningBalanceValidationError,
)
from opening_balances.tests.utils import (
    OPENING_DATE,
    TODAY,
    line,
    make_customer,
    make_supplier,
    make_user,
)


class WorkflowTestBase(TestCase):
    def setUp(self):
        self.accounts = seed_control_accounts()
        self.clerk = make_user("clerk")
        self.manager = make_user("manager")
        self.customer = make_customer()
        self.supplier = make_supplier()

    def _batch(self, lines=None, submit=True):
        batch = create_batch(
            opening_date=OPENING_DATE,
            notes="",
            lines=lines or [line(self.customer, debit="100"), line(self.supplier, credit="200")],
            acting_user=self.clerk,
            today=TODAY,
        )
        if submit:
            workflow.submit(batch_id=batch.pk, acting_user=self.clerk)
        return batch

    def _actions(self, batch_id):
        return list(
            history_for(HISTORY_MODULE, batch_id).order_by("id").values_list("action", flat=True)
        )


class SubmitApproveRejectTests(WorkflowTestBase):
    def test_submit_moves_draft_to_submitted(self):
        batch = self._batch(submit=False)

        submitted = workflow.submit(batch_id=batch.pk, acting_user=self.clerk)

        self.assertEqual(submitted.status, OpeningBalanceBatch.STATUS_SUBMITTED)
        entry = history_for(HISTORY_MODULE, batch.pk).get(action="SUBMITTED")
        self.assertEqual(entry.details, {"previous_status": 3, "new_status": 8})

    def test_submit_requires_draft(self):
        batch = self._batch()
        with self.assertRaisesMessage(BatchNotFoundError, "not in Draft status"):
            workflow.submit(batch_id=batch.pk, acting_user=self.clerk)

    def test_approve_posts_balanced_journal_and_links_it(self):
        batch = self._batch()

        approved, journal = workflow.approve(
            batch_id=batch.pk, acting_user=self.manager, comment="Checked against TB"
        )

        self.assertEqual(approved.status, OpeningBalanceBatch.STATUS_APPROVED)
        self.assertEqual(approved.approved_by, self.manager)
        self.assertIsNotNone(approved.approved_at)
        self.assertEqual(approved.gl_journal, journal)
        self.assertEqual(approved.edit_request_status, OpeningBalanceBatch.EDIT_NONE)

        self.assertEqual(journal.source_type, "OPENING_BALANCE")
        self.assertEqual(journal.source_id, str(batch.pk))
        self.assertEqual(journal.source_name, batch.batch_no)
        self.assertEqual(journal.journal_date, OPENING_DATE)
        self.assertEqual(journal.memo, f"Opening Balance Batch {batch.batch_no}")
        self.assertEqual(journal.exchange_rate, Decimal("1.000000"))
        self.assertEqual(journal.total_amount, Decimal("300.00"))

        lines = list(JournalLine.objects.filter(journal=journal).order_by("line_no"))
        self.assertEqual(
            [(l.account.code, l.debit, l.credit) for l in lines],
            [
                ("1200", Decimal("100.00"), Decimal("0.00")),
                ("3000", Decimal("0.00"), Decimal("100.00")),
                ("3000", Decimal("200.00"), Decimal("0.00")),
                ("2000", Decimal("0.00"), Decimal("200.00")),
            ],
        )
        self.assertEqual(sum(l.debit for l in lines), sum(l.credit for l in lines))

        entry = history_for(HISTORY_MODULE, batch.pk).get(action="APPROVED")
        self.assertEqual(
            entry.details, {"gl_journal_id": journal.pk, "comment": "Checked against TB"}
        )

    def test_second_approve_fails_and_only_one_journal_exists(self):
        batch = self._batch()
        workflow.approve(batch_id=batch.pk, acting_user=self.manager)

        with self.assertRaises(BatchNotFoundError):
            workflow.approve(batch_id=batch.pk, acting_user=self.manager)

        self.assertEqual(
            JournalEntry.objects.filter(source_type="OPENING_BALANCE", source_id=str(batch.pk)).count(),
            1,
        )

    def test_approve_losing_the_race_writes_nothing(self):
        batch = self._batch()

        def _someone_else_moves_it():
            OpeningBalanceBatch.objects.filter(pk=batch.pk).update(
                status=OpeningBalanceBatch.STATUS_REJECTED
            )
            return get_opening_balance_accounts()

        with mock.patch.object(
            workflow, "get_opening_balance_accounts", side_effect=_someone_else_moves_it
        ):
            with self.assertRaises(BatchNotFoundError):
                workflow.approve(batch_id=batch.pk, acting_user=self.manager)

        self.assertFalse(JournalEntry.objects.exists())

    def test_approve_posts_the_lines_present_when_the_batch_is_claimed(self):
        batch = self._batch(lines=[line(self.customer, debit="100")])
        claim = workflow._transition
        edited = []

        def _edit_and_resubmit_then_claim(*args, **kwargs):
            if not edited:
                edited.append(True)
                update_batch(
                    batch_id=batch.pk,
                    opening_date=OPENING_DATE,
                    notes="Corrected before approval",
                    lines=[line(self.customer, debit="999")],
                    acting_user=self.clerk,
                )
                workflow.submit(batch_id=batch.pk, acting_user=self.clerk)
            return claim(*args, **kwargs)

        with mock.patch.object(
            workflow, "_transition", side_effect=_edit_and_resubmit_then_claim
        ):
            approved, journal = workflow.approve(batch_id=batch.pk, acting_user=self.manager)

        stored = [ln.debit_base for ln in approved.lines.all()]
        posted = list(
            JournalLine.objects.filter(journal=journal, account__code="1200").values_list(
                "debit", flat=True
            )
        )
        self.assertEqual(stored, [Decimal("999.0000")])
        self.assertEqual(posted, [Decimal("999.00")])
        self.assertEqual(journal.total_amount, Decimal("999.00"))
        self.assertEqual(approved.status, OpeningBalanceBatch.STATUS_APPROVED)

    def test_conditional_transition_refuses_stale_state(self):
        batch = self._batch(submit=False)

        moved = workflow._transition(
            batch.pk,
            where={"status": OpeningBalanceBatch.STATUS_SUBMITTED},
            changes={"status": OpeningBalanceBatch.STATUS_APPROVED},
        )

        self.assertFalse(moved)
        batch.refresh_from_db()
        self.assertEqual(batch.status, OpeningBalanceBatch.STATUS_DRAFT)

    def test_approve_requires_submitted(self):
        batch = self._batch(submit=False)
        with self.assertRaisesMessage(BatchNotFoundError, "not in Submitted status"):
            workflow.approve(batch_id=batch.pk, acting_user=self.manager)

    def test_approve_with_only_zero_nets_is_rejected(self):
        batch = self._batch(lines=[line(self.customer, debit="10", credit="10")])

        with self.assertRaisesMessage(
            OpeningBalanceValidationError, "No valid opening balance lines to post"
        ):
            workflow.approve(batch_id=batch.pk, acting_user=self.manager)

        batch.refresh_from_db()
        self.assertEqual(batch.status, OpeningBalanceBatch.STATUS_SUBMITTED)

    def test_missing_control_account_is_a_configuration_error(self):
        Account.objects.filter(code="2000").update(is_active=False)
        batch = self._batch()

        with self.assertRaisesMessage(AccountResolutionError, "Accounts Payable account (code=2000)"):
            workflow.approve(batch_id=batch.pk, acting_user=self.manager)

        batch.refresh_from_db()
        self.assertEqual(batch.status, OpeningBalanceBatch.STATUS_SUBMITTED)
        self.assertIsNone(batch.gl_journal_id)
        self.assertFalse(JournalEntry.objects.exists())

    def test_reject_requires_reason_and_keeps_status(self):
        batch = self._batch()

        with self.assertRaisesMessage(OpeningBalanceValidationError, "Rejection reason is required"):
            workflow.reject(batch_id=batch.pk, acting_user=self.manager, reason="  ")

        batch.refresh_from_db()
        self.assertEqual(batch.status, OpeningBalanceBatch.STATUS_SUBMITTED)

        rejected = workflow.reject(batch_id=batch.pk, acting_user=self.manager, reason="Wrong totals")
        self.assertEqual(rejected.status, OpeningBalanceBatch.STATUS_REJECTED)
        self.assertEqual(
            history_for(HISTORY_MODULE, batch.pk).get(action="REJECTED").details,
            {"reason": "Wrong totals"},
        )

    def test_reject_reason_is_checked_before_state(self):
        with self.assertRaisesMessage(OpeningBalanceValidationError, "Rejection reason is required"):
            workflow.reject(batch_id=999999, acting_user=self.manager, reason="")


class EditRequestTests(WorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.batch = self._batch()
        _, self.first_journal = workflow.approve(batch_id=self.batch.pk, acting_user=self.manager)

    def _request(self, reason="Customer balance was wrong"):
        return workflow.request_edit(batch_id=self.batch.pk, acting_user=self.clerk, reason=reason)

    def test_request_edit_marks_pending(self):
        batch = self._request()

        self.assertEqual(batch.edit_request_status, OpeningBalanceBatch.EDIT_PENDING)
        self.assertEqual(batch.edit_requested_by, self.clerk)
        self.assertEqual(batch.edit_request_reason, "Customer balance was wrong")
        self.assertEqual(batch.status, OpeningBalanceBatch.STATUS_APPROVED)

    def test_request_edit_gating(self):
        with self.assertRaisesMessage(OpeningBalanceValidationError, "reason is required"):
            self._request(reason="")

        with self.assertRaises(BatchNotFoundError):
            workflow.request_edit(batch_id=999999, acting_user=self.clerk, reason="x")

        draft = self._batch(lines=[line(self.customer, debit="5")], submit=False)
        with self.assertRaisesMessage(OpeningBalanceValidationError, "approved batches"):
            workflow.request_edit(batch_id=draft.pk, acting_user=self.clerk, reason="x")

        self._request()
        with self.assertRaisesMessage(OpeningBalanceValidationError, "already pending"):
            self._request()

    def test_decide_requires_pending_request_and_known_decision(self):
        with self.assertRaisesMessage(OpeningBalanceValidationError, "No pending edit request"):
            workflow.decide_edit_request(
                batch_id=self.batch.pk, acting_user=self.manager, decision="approve"
            )

        self._request()
        with self.assertRaisesMessage(OpeningBalanceValidationError, "Decision must be"):
            workflow.decide_edit_request(
                batch_id=self.batch.pk, acting_user=self.manager, decision="maybe"
            )

        with self.assertRaises(BatchNotFoundError):
            workflow.decide_edit_request(batch_id=999999, acting_user=self.manager, decision="approve")

    def test_rejecting_edit_request_needs_reason(self):
        self._request()

        with self.assertRaisesMessage(OpeningBalanceValidationError, "Rejection reason is required"):
            workflow.decide_edit_request(
                batch_id=self.batch.pk, acting_user=self.manager, decision="reject"
            )

        batch = workflow.decide_edit_request(
            batch_id=self.batch.pk, acting_user=self.manager, decision="REJECT", reason="Not needed"
        )
        self.assertEqual(batch.edit_request_status, OpeningBalanceBatch.EDIT_REJECTED)
        self.assertEqual(batch.edit_rejection_reason, "Not needed")
        self.assertEqual(batch.status, OpeningBalanceBatch.STATUS_APPROVED)

        # A rejected request can be raised again
        self.assertEqual(self._request().edit_request_status, OpeningBalanceBatch.EDIT_PENDING)

    def test_approved_edit_reopens_batch_and_reapproval_supersedes_journal(self):
        self._request()
        reopened = workflow.decide_edit_request(
            batch_id=self.batch.pk, acting_user=self.manager, decision="approve"
        )

        self.assertEqual(reopened.status, OpeningBalanceBatch.STATUS_DRAFT)
        self.assertEqual(reopened.edit_request_status, OpeningBalanceBatch.EDIT_APPROVED)
        self.assertEqual(reopened.edit_approved_by, self.manager)

        # Linked journal stays active until the batch is re-approved
        self.first_journal.refresh_from_db()
        self.assertFalse(self.first_journal.is_deleted)

        with self.assertRaisesMessage(OpeningBalanceValidationError, "posted journal"):
            cancel_batch(batch_id=self.batch.pk, acting_user=self.clerk)

        update_batch(
            batch_id=self.batch.pk,
            opening_date=OPENING_DATE,
            notes="Corrected",
            lines=[line(self.customer, debit="150"), line(self.supplier, credit="200")],
            acting_user=self.clerk,
        )
        workflow.submit(batch_id=self.batch.pk, acting_user=self.clerk)
        batch, second_journal = workflow.approve(batch_id=self.batch.pk, acting_user=self.manager)

        self.first_journal.refresh_from_db()
        self.assertTrue(self.first_journal.is_deleted)
        self.assertIsNotNone(self.first_journal.deleted_at)
        self.assertEqual(self.first_journal.superseded_by, second_journal)
        self.assertTrue(JournalLine.objects.filter(journal=self.first_journal).exists())

        self.assertEqual(batch.gl_journal, second_journal)
        self.assertEqual(batch.edit_request_status, OpeningBalanceBatch.EDIT_NONE)
        self.assertEqual(second_journal.total_amount, Decimal("350.00"))
        self.assertEqual(
            JournalEntry.objects.active().for_source("OPENING_BALANCE", self.batch.pk).get(),
            second_journal,
        )

        self.assertEqual(
            self._actions(self.batch.pk),
            [
                "CREATED",
                "SUBMITTED",
                "APPROVED",
                "EDIT_REQUESTED",
                "EDIT_REQUEST_APPROVED",
                "UPDATED",
                "SUBMITTED",
                "APPROVED",
            ],
        )


class ConfigurableControlAccountTests(TestCase):
    def test_approve_uses_configured_codes(self):
        chart = create_active_chart()
        ensure_account(chart, "1100", "Trade Debtors", Account.ASSET)
        ensure_account(chart, "2100", "Trade Creditors", Account.LIABILITY)
        ensure_account(chart, "3900", "Opening Equity", Account.EQUITY)

        customer = make_customer()
        user = make_user()
        batch = create_batch(
            opening_date=OPENING_DATE,
            notes="",
            lines=[line(customer, debit="10")],
            acting_user=user,
            today=TODAY,
        )
        workflow.submit(batch_id=batch.pk, acting_user=user)

        with self.settings(ACCOUNTING_CONTROL_ACCOUNTS={"AR": "1100", "AP": "2100", "EQUITY": "3900"}):
            _, journal = workflow.approve(batch_id=batch.pk, acting_user=user)

        codes = list(journal.lines.order_by("line_no").values_list("account__code", flat=True))
        self.assertEqual(codes, ["1100", "3900"])
