# opening_balances/tests/test_domain.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from opening_balances.domain import (
    OpeningBalanceError,
    OpeningBalanceLineInput,
    OpeningBalancePayload,
    PartyType,
)


def _payload(lines, opening_date="2026-01-01"):
    return OpeningBalancePayload.from_raw(
        opening_date=opening_date,
        notes="  migrated  ",
        raw_lines=lines,
        base_currency="AED",
    )


class OpeningBalanceDomainTests(SimpleTestCase):
    def test_base_currency_line_gets_unit_rate(self):
        payload = _payload([{"party_type": "customer", "party_id": "7", "debit_foreign": "100"}])

        self.assertEqual(payload.opening_date, date(2026, 1, 1))
        self.assertEqual(payload.notes, "migrated")

        (ln,) = payload.lines
        self.assertEqual(ln.party_type, PartyType.CUSTOMER)
        self.assertEqual(ln.party_id, 7)
        self.assertEqual(ln.currency_code, "AED")
        self.assertEqual(ln.fx_rate_to_base, Decimal("1.000000"))
        self.assertEqual(ln.debit_base, Decimal("100.0000"))
        self.assertEqual(ln.credit_base, Decimal("0.0000"))

    def test_foreign_line_keeps_supplied_rate(self):
        (ln,) = _payload(
            [
                {
                    "party_type": "SUPPLIER",
                    "party_id": 3,
                    "currency_code": "usd",
                    "fx_rate_to_base": "3.6725",
                    "credit_foreign": "10",
                }
            ]
        ).lines

        self.assertEqual(ln.currency_code, "USD")
        self.assertEqual(ln.credit_base, Decimal("36.7250"))

    def test_foreign_line_without_rate_is_left_for_resolution(self):
        (ln,) = _payload(
            [{"party_type": "SUPPLIER", "party_id": 3, "currency_code": "EUR", "debit_foreign": 5}]
        ).lines

        self.assertIsNone(ln.fx_rate_to_base)
        with self.assertRaises(OpeningBalanceError):
            ln.debit_base

        resolved = ln.with_rate(Decimal("4"))
        self.assertEqual(resolved.debit_base, Decimal("20.0000"))

    def test_rejects_non_positive_rate(self):
        with self.assertRaisesMessage(OpeningBalanceError, "Line 1: Exchange rate must be greater than 0"):
            _payload(
                [
                    {
                        "party_type": "SUPPLIER",
                        "party_id": 3,
                        "currency_code": "EUR",
                        "fx_rate_to_base": "0",
                        "debit_foreign": 5,
                    }
                ]
            )

    def test_rejects_zero_and_negative_amounts(self):
        with self.assertRaisesMessage(OpeningBalanceError, "At least one of debit or credit"):
            _payload([{"party_type": "CUSTOMER", "party_id": 1}])

        with self.assertRaisesMessage(OpeningBalanceError, "cannot be negative"):
            _payload([{"party_type": "CUSTOMER", "party_id": 1, "debit_foreign": "-1"}])

    def test_rejects_bad_party(self):
        with self.assertRaisesMessage(OpeningBalanceError, "party_type must be CUSTOMER or SUPPLIER"):
            _payload([{"party_type": "EMPLOYEE", "party_id": 1, "debit_foreign": 1}])

        with self.assertRaisesMessage(OpeningBalanceError, "party_id must be a positive integer"):
            _payload([{"party_type": "CUSTOMER", "party_id": 0, "debit_foreign": 1}])

        with self.assertRaisesMessage(OpeningBalanceError, "Line 2: Each line must have party_type"):
            _payload(
                [
                    {"party_type": "CUSTOMER", "party_id": 1, "debit_foreign": 1},
                    {"party_type": "CUSTOMER", "debit_foreign": 1},
                ]
            )

    def test_rejects_duplicate_party(self):
        with self.assertRaisesMessage(OpeningBalanceError, "Duplicate party entries"):
            _payload(
                [
                    {"party_type": "CUSTOMER", "party_id": 1, "debit_foreign": 1},
                    {"party_type": "customer", "party_id": "1", "credit_foreign": 2},
                ]
            )

    def test_same_id_different_party_type_is_allowed(self):
        payload = _payload(
            [
                {"party_type": "CUSTOMER", "party_id": 1, "debit_foreign": 1},
                {"party_type": "SUPPLIER", "party_id": 1, "credit_foreign": 2},
            ]
        )
        self.assertEqual(len(payload.lines), 2)

    def test_requires_date_and_lines(self):
        with self.assertRaisesMessage(OpeningBalanceError, "Opening date is required"):
            _payload([{"party_type": "CUSTOMER", "party_id": 1, "debit_foreign": 1}], opening_date=None)

        with self.assertRaisesMessage(OpeningBalanceError, "valid date"):
            _payload([{"party_type": "CUSTOMER", "party_id": 1, "debit_foreign": 1}], opening_date="01/01/2026")

        with self.assertRaisesMessage(OpeningBalanceError, "At least one opening balance line"):
            _payload([])

    def test_amounts_are_rounded_half_up_to_four_places(self):
        ln = OpeningBalanceLineInput.from_raw(
            {"party_type": "CUSTOMER", "party_id": 1, "debit_foreign": "10.00005"},
            base_currency="AED",
        )
        self.assertEqual(ln.debit_foreign, Decimal("10.0001"))

    def test_rejects_amounts_the_ledger_cannot_hold(self):
        with self.assertRaisesMessage(OpeningBalanceError, "Invalid debit amount"):
            _payload([{"party_type": "CUSTOMER", "party_id": 1, "debit_foreign": "1e30"}])

        with self.assertRaisesMessage(OpeningBalanceError, "Invalid exchange rate"):
            _payload(
                [
                    {
                        "party_type": "CUSTOMER",
                        "party_id": 1,
                        "currency_code": "USD",
                        "fx_rate_to_base": "1e12",
                        "debit_foreign": "1",
                    }
                ]
            )

        with self.assertRaisesMessage(
            OpeningBalanceError, "Line 1: Base amount for CUSTOMER 1 exceeds the maximum"
        ):
            _payload(
                [
                    {
                        "party_type": "CUSTOMER",
                        "party_id": 1,
                        "currency_code": "USD",
                        "fx_rate_to_base": "999999999999.999999",
                        "debit_foreign": "99999999999999.9999",
                    }
                ]
            )

    def test_resolved_rate_is_checked_against_base_ceiling(self):
        ln = OpeningBalanceLineInput.from_raw(
            {
                "party_type": "SUPPLIER",
                "party_id": 4,
                "currency_code": "USD",
                "credit_foreign": "10000000000000",
            },
            base_currency="AED",
        )
        self.assertIsNone(ln.fx_rate_to_base)

        with self.assertRaisesMessage(OpeningBalanceError, "exceeds the maximum"):
            ln.with_rate(Decimal("1000")).check_base_amounts()

        ln.with_rate(Decimal("9")).check_base_amounts()
