# opening_balances/tests/test_posting.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from accounting.services.account_resolver import ControlAccounts
from accounting.tests.utils import seed_control_accounts
from opening_balances.models import OpeningBalanceLine
from opening_balances.services.posting import build_journal_lines


def _line(party_type, party_id, debit="0", credit="0"):
    return OpeningBalanceLine(
        party_type=party_type,
        party_id=party_id,
        currency_code="AED",
        debit_foreign=Decimal(debit),
        credit_foreign=Decimal(credit),
        debit_base=Decimal(debit),
        credit_base=Decimal(credit),
    )


def _shape(postings):
    return [(p["account"].code, p["debit"], p["credit"]) for p in postings]


CUSTOMER = OpeningBalanceLine.PARTY_CUSTOMER
SUPPLIER = OpeningBalanceLine.PARTY_SUPPLIER


class BuildJournalLinesTests(TestCase):
    def setUp(self):
        accounts = seed_control_accounts()
        self.accounts = ControlAccounts(
            receivable=accounts["1200"],
            payable=accounts["2000"],
            equity=accounts["3000"],
        )
        self.zero = Decimal("0.00")

    def test_customer_debit_posts_receivable_against_equity(self):
        postings, total = build_journal_lines([_line(CUSTOMER, 1, debit="100")], self.accounts)

        self.assertEqual(
            _shape(postings),
            [("1200", Decimal("100.00"), self.zero), ("3000", self.zero, Decimal("100.00"))],
        )
        self.assertEqual(total, Decimal("100.00"))

    def test_customer_credit_leaves_contra_inside_receivable(self):
        postings, total = build_journal_lines([_line(CUSTOMER, 1, credit="50")], self.accounts)

        self.assertEqual(
            _shape(postings),
            [("3000", Decimal("50.00"), self.zero), ("1200", self.zero, Decimal("50.00"))],
        )
        self.assertEqual(total, Decimal("50.00"))

    def test_supplier_credit_posts_payable_against_equity(self):
        postings, _ = build_journal_lines([_line(SUPPLIER, 4, credit="200")], self.accounts)

        self.assertEqual(
            _shape(postings),
            [("3000", Decimal("200.00"), self.zero), ("2000", self.zero, Decimal("200.00"))],
        )

    def test_supplier_debit_leaves_contra_inside_payable(self):
        postings, _ = build_journal_lines([_line(SUPPLIER, 4, debit="75")], self.accounts)

        self.assertEqual(
            _shape(postings),
            [("2000", Decimal("75.00"), self.zero), ("3000", self.zero, Decimal("75.00"))],
        )

    def test_nets_debit_and_credit_on_one_line(self):
        postings, total = build_journal_lines(
            [_line(CUSTOMER, 1, debit="120", credit="20")], self.accounts
        )
        self.assertEqual(total, Decimal("100.00"))
        self.assertEqual(postings[0]["debit"], Decimal("100.00"))

    def test_sub_cent_and_zero_nets_are_skipped(self):
        postings, total = build_journal_lines(
            [
                _line(CUSTOMER, 1, debit="0.0049"),
                _line(SUPPLIER, 2, debit="10", credit="10"),
            ],
            self.accounts,
        )
        self.assertEqual(postings, [])
        self.assertEqual(total, Decimal("0.00"))

    def test_customers_first_then_suppliers_by_party_id(self):
        lines = [
            _line(SUPPLIER, 1, credit="5"),
            _line(CUSTOMER, 9, debit="3"),
            _line(CUSTOMER, 2, debit="2"),
        ]
        postings, _ = build_journal_lines(lines, self.accounts)

        self.assertEqual(
            [(p["entity_type"], p["entity_id"]) for p in postings],
            [
                (CUSTOMER, 2),
                (CUSTOMER, 2),
                (CUSTOMER, 9),
                (CUSTOMER, 9),
                (SUPPLIER, 1),
                (SUPPLIER, 1),
            ],
        )
        self.assertEqual(postings[0]["description"], "Opening Balance - Customer 2")
        self.assertEqual(postings[-1]["description"], "Opening Balance - Supplier 1")

    def test_output_is_balanced_and_deterministic(self):
        lines = [
            _line(CUSTOMER, 3, debit="100.125"),
            _line(CUSTOMER, 1, credit="40"),
            _line(SUPPLIER, 8, credit="300.5"),
            _line(SUPPLIER, 5, debit="12.34"),
        ]

        first, total = build_journal_lines(lines, self.accounts)
        second, _ = build_journal_lines(list(reversed(lines)), self.accounts)

        self.assertEqual(_shape(first), _shape(second))
        self.assertEqual(sum(p["debit"] for p in first), sum(p["credit"] for p in first))
        self.assertEqual(sum(p["debit"] for p in first), total)
