# history/tests/test_history.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from history.models import HistoryEntry
from history.services import append_history, diff_snapshots, history_for


class DiffSnapshotsTests(TestCase):
    def test_only_changed_fields_are_reported(self):
        before = {"opening_date": date(2026, 1, 1), "notes": "a", "status": 2}
        after = {"opening_date": date(2026, 1, 1), "notes": "b", "status": 3}

        diff = diff_snapshots(before, after, ["opening_date", "notes", "status"])

        self.assertEqual(
            diff,
            {"notes": {"from": "a", "to": "b"}, "status": {"from": 2, "to": 3}},
        )

    def test_values_are_json_safe(self):
        diff = diff_snapshots(
            {"opening_date": date(2026, 1, 1), "amount": Decimal("1.50")},
            {"opening_date": date(2026, 2, 1), "amount": Decimal("2.00")},
            ["opening_date", "amount"],
        )
        self.assertEqual(diff["opening_date"], {"from": "2026-01-01", "to": "2026-02-01"})
        self.assertEqual(diff["amount"], {"from": "1.50", "to": "2.00"})


class AppendHistoryTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="auditor", password="x")

    def test_append_and_read_back(self):
        append_history(
            module="opening_balance",
            module_id=7,
            user=self.user,
            action="CREATED",
            details={"batch_no": "OB-26-100001", "opening_date": date(2026, 1, 1)},
        )
        append_history(module="opening_balance", module_id=8, user=None, action="CREATED")

        rows = list(history_for("opening_balance", 7))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].user, self.user)
        self.assertEqual(rows[0].details["opening_date"], "2026-01-01")

    def test_entries_are_append_only(self):
        entry = append_history(module="m", module_id=1, user=self.user, action="X")

        with self.assertRaises(ValidationError):
            entry.action = "Y"
            entry.save()
        with self.assertRaises(ValidationError):
            entry.delete()
        self.assertEqual(HistoryEntry.objects.get(pk=entry.pk).action, "X")
