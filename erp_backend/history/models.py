# history/models.py

"""
HISTORY ENTRY (IMMUTABLE)

One row per action taken on a record of any module:
- module / module_id identify the record (no FK: the record may be gone,
  e.g. a cancelled opening balance batch keeps its history)
- details is a JSON payload (diffs, reasons, journal ids)

Created once. Never updated. Never deleted.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class HistoryEntry(models.Model):
    module = models.CharField(max_length=50)
    module_id = models.CharField(max_length=64)

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="history_entries",
    )

    action = models.CharField(max_length=50)
    details = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "History Entry"
        verbose_name_plural = "History Entries"
        indexes = [
            models.Index(fields=["module", "module_id"], name="history_module_record_idx"),
        ]

    def __str__(self):
        return f"{self.module}:{self.module_id} {self.action}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("History entries are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("History entries cannot be deleted")
