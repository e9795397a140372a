# opening_balances/tests/test_batch_store.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from accounting.models.currency import Currency, ExchangeRate
from history.models import HistoryEntry
from history.services import history_for
from opening_balances.models import OpeningBalanceBatch, OpeningBalanceLine
from opening_balances.services.batch_store import (
    HISTORY_MODULE,
    cancel_batch,
    create_batch,
    next_batch_number,
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


class BatchStoreTests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.customer = make_customer()
        self.supplier = make_supplier()

    def _create(self, lines=None, **kwargs):
        kwargs.setdefault("today", TODAY)
        return create_batch(
            opening_date=OPENING_DATE,
            notes="Migration from legacy ledger",
            lines=lines or [line(self.customer, debit="100")],
            acting_user=self.user,
            **kwargs,
        )

    # ----------------------------
    # create
    # ----------------------------

    def test_create_persists_draft_header_lines_and_history(self):
        batch = self._create(
            [line(self.customer, debit="100"), line(self.supplier, credit="40.5")]
        )

        self.assertEqual(batch.batch_no, "OB-26-030001")
        self.assertEqual(batch.status, OpeningBalanceBatch.STATUS_DRAFT)
        self.assertEqual(batch.company_id, 1)
        self.assertEqual(batch.created_by, self.user)

        lines = list(batch.lines.order_by("party_type"))
        self.assertEqual(len(lines), 2)
        self.assertEqual(lines[0].debit_base, Decimal("100.0000"))
        self.assertEqual(lines[1].credit_base, Decimal("40.5000"))
        self.assertEqual(lines[1].fx_rate_to_base, Decimal("1.000000"))

        (entry,) = history_for(HISTORY_MODULE, batch.pk)
        self.assertEqual(entry.action, "CREATED")
        self.assertEqual(entry.user, self.user)
        self.assertEqual(
            entry.details, {"batch_no": "OB-26-030001", "opening_date": "2026-01-01"}
        )

    def test_batch_numbers_are_sequential_within_a_year(self):
        self._create()
        second = self._create(today=date(2026, 4, 20))
        next_year = self._create(today=date(2027, 1, 2))

        self.assertEqual(second.batch_no, "OB-26-040002")
        self.assertEqual(next_year.batch_no, "OB-27-010001")
        self.assertEqual(next_batch_number(date(2026, 12, 31)), "OB-26-120003")

    def test_batch_number_collision_is_retried(self):
        OpeningBalanceBatch.objects.create(batch_no="OB-26-039999", opening_date=OPENING_DATE)

        with mock.patch(
            "opening_balances.services.batch_store.next_batch_number",
            side_effect=["OB-26-039999", "OB-26-040000"],
        ) as gen:
            batch = self._create()

        self.assertEqual(gen.call_count, 2)
        self.assertEqual(batch.batch_no, "OB-26-040000")

    def test_company_id_is_explicit(self):
        self.assertEqual(self._create(company_id=42).company_id, 42)

    def test_rejects_duplicate_party(self):
        with self.assertRaisesMessage(OpeningBalanceValidationError, "Duplicate party entries"):
            self._create([line(self.customer, debit="1"), line(self.customer, credit="2")])
        self.assertFalse(OpeningBalanceBatch.objects.exists())

    def test_rejects_unknown_or_inactive_party(self):
        inactive = make_customer("Dormant LLC", is_active=False)

        with self.assertRaisesMessage(OpeningBalanceValidationError, "does not exist or is inactive"):
            self._create([line(inactive, debit="1")])

        with self.assertRaises(OpeningBalanceValidationError):
            self._create([{"party_type": "SUPPLIER", "party_id": self.customer.pk, "debit_foreign": 1}])

        self.assertFalse(OpeningBalanceBatch.objects.exists())

    def test_foreign_currency_requires_a_rate(self):
        with self.assertRaisesMessage(
            OpeningBalanceValidationError, "Exchange rate is required for currency USD"
        ):
            self._create([line(self.supplier, credit="10", currency_code="USD")])

    def test_foreign_currency_rate_is_resolved_on_opening_date(self):
        usd = Currency.objects.create(code="USD", name="US Dollar")
        ExchangeRate.objects.create(
            currency=usd, effective_from=date(2025, 12, 1), rate_to_base=Decimal("3.672500")
        )
        ExchangeRate.objects.create(
            currency=usd, effective_from=date(2026, 6, 1), rate_to_base=Decimal("3.700000")
        )

        batch = self._create([line(self.supplier, credit="100", currency_code="usd")])
        ln = batch.lines.get()

        self.assertEqual(ln.currency, usd)
        self.assertEqual(ln.fx_rate_to_base, Decimal("3.672500"))
        self.assertEqual(ln.credit_base, Decimal("367.2500"))

    def test_supplied_rate_allows_currency_outside_the_table(self):
        batch = self._create(
            [line(self.supplier, debit="10", currency_code="EUR", fx_rate_to_base="4")]
        )
        ln = batch.lines.get()

        self.assertIsNone(ln.currency)
        self.assertEqual(ln.currency_code, "EUR")
        self.assertEqual(ln.debit_base, Decimal("40.0000"))

    def test_resolved_rate_that_overflows_base_amount_is_rejected_before_writing(self):
        usd = Currency.objects.create(code="USD", name="US Dollar")
        ExchangeRate.objects.create(
            currency=usd, effective_from=date(2025, 12, 1), rate_to_base=Decimal("1000")
        )

        with self.assertRaisesMessage(OpeningBalanceValidationError, "exceeds the maximum"):
            self._create(
                [line(self.customer, debit="10000000000000", currency_code="USD")]
            )

        self.assertFalse(OpeningBalanceBatch.objects.exists())
        self.assertFalse(OpeningBalanceLine.objects.exists())

    # ----------------------------
    # update
    # ----------------------------

    def test_update_replaces_lines_and_resets_to_draft(self):
        batch = self._create([line(self.customer, debit="100")])
        OpeningBalanceBatch.objects.filter(pk=batch.pk).update(
            status=OpeningBalanceBatch.STATUS_REJECTED
        )
        old_line_ids = set(batch.lines.values_list("pk", flat=True))

        updated = update_batch(
            batch_id=batch.pk,
            opening_date=date(2026, 1, 31),
            notes="Corrected",
            lines=[line(self.customer, debit="90"), line(self.supplier, credit="10")],
            acting_user=self.user,
        )

        self.assertEqual(updated.status, OpeningBalanceBatch.STATUS_DRAFT)
        self.assertEqual(updated.updated_by, self.user)
        self.assertEqual(updated.lines.count(), 2)
        self.assertFalse(OpeningBalanceLine.objects.filter(pk__in=old_line_ids).exists())

        entry = HistoryEntry.objects.filter(module=HISTORY_MODULE, action="UPDATED").get()
        self.assertEqual(
            entry.details["changes"],
            {
                "opening_date": {"from": "2026-01-01", "to": "2026-01-31"},
                "notes": {"from": "Migration from legacy ledger", "to": "Corrected"},
                "status": {"from": OpeningBalanceBatch.STATUS_REJECTED, "to": OpeningBalanceBatch.STATUS_DRAFT},
            },
        )
        self.assertEqual(entry.details["line_count"], {"from": 1, "to": 2})

    def test_update_refuses_approved_batch(self):
        batch = self._create()
        OpeningBalanceBatch.objects.filter(pk=batch.pk).update(
            status=OpeningBalanceBatch.STATUS_APPROVED
        )

        with self.assertRaisesMessage(BatchNotFoundError, "not in an editable status"):
            update_batch(
                batch_id=batch.pk,
                opening_date=OPENING_DATE,
                notes="",
                lines=[line(self.customer, debit="1")],
                acting_user=self.user,
            )

        batch.refresh_from_db()
        self.assertEqual(batch.lines.get().debit_base, Decimal("100.0000"))

    def test_update_validation_failure_keeps_previous_lines(self):
        batch = self._create()

        with self.assertRaises(OpeningBalanceValidationError):
            update_batch(
                batch_id=batch.pk,
                opening_date=OPENING_DATE,
                notes="",
                lines=[line(self.customer, debit="1"), line(self.customer, debit="2")],
                acting_user=self.user,
            )

        self.assertEqual(batch.lines.count(), 1)

    # ----------------------------
    # cancel
    # ----------------------------

    def test_cancel_deletes_draft_but_history_survives(self):
        batch = self._create()
        batch_id = batch.pk

        self.assertEqual(cancel_batch(batch_id=batch_id, acting_user=self.user), batch.batch_no)

        self.assertFalse(OpeningBalanceBatch.objects.filter(pk=batch_id).exists())
        self.assertFalse(OpeningBalanceLine.objects.filter(batch_id=batch_id).exists())
        self.assertEqual(
            list(history_for(HISTORY_MODULE, batch_id).order_by("id").values_list("action", flat=True)),
            ["CREATED", "CANCELLED"],
        )

    def test_cancel_is_draft_only(self):
        batch = self._create()
        OpeningBalanceBatch.objects.filter(pk=batch.pk).update(
            status=OpeningBalanceBatch.STATUS_SUBMITTED
        )

        with self.assertRaisesMessage(BatchNotFoundError, "not in Draft status"):
            cancel_batch(batch_id=batch.pk, acting_user=self.user)

        with self.assertRaises(BatchNotFoundError):
            cancel_batch(batch_id=999999, acting_user=self.user)
