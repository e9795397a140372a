# opening_balances/models/batch.py

"""
======================================================
PATH: opening_balances/models/batch.py
======================================================
OPENING BALANCE BATCH (HEADER)

Two independent state axes:
- status: Draft(3) -> Submitted(8) -> Approved(1) | Rejected(2)
- edit_request_status: None(0) / Pending(3) / Approved(1) / Rejected(2)

A Pending edit request only exists on an Approved batch (DB check).

Transitions are applied by opening_balances.services.workflow through
conditional queryset updates; this model never changes status on save().
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

User = settings.AUTH_USER_MODEL


class OpeningBalanceBatch(models.Model):
    # ----------------------------
    # Status (numeric ids are shared with the wider status table)
    # ----------------------------
    STATUS_APPROVED = 1
    STATUS_REJECTED = 2
    STATUS_DRAFT = 3
    STATUS_SUBMITTED = 8

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SUBMITTED, "Submitted for Approval"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    EDITABLE_STATUSES = (STATUS_DRAFT, STATUS_SUBMITTED, STATUS_REJECTED)

    # ----------------------------
    # Edit request sub-state
    # ----------------------------
    EDIT_NONE = 0
    EDIT_APPROVED = 1
    EDIT_REJECTED = 2
    EDIT_PENDING = 3

    EDIT_REQUEST_CHOICES = [
        (EDIT_NONE, "None"),
        (EDIT_PENDING, "Pending"),
        (EDIT_APPROVED, "Approved"),
        (EDIT_REJECTED, "Rejected"),
    ]

    company_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)

    batch_no = models.CharField(max_length=30, unique=True)
    opening_date = models.DateField()
    notes = models.TextField(blank=True, default="")

    status = models.PositiveSmallIntegerField(
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
        db_index=True,
    )

    gl_journal = models.ForeignKey(
        "accounting.JournalEntry",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="opening_balance_batches",
    )

    # ----------------------------
    # Audit
    # ----------------------------
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ob_batches_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    updated_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ob_batches_updated",
    )
    updated_at = models.DateTimeField(auto_now=True)

    approved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ob_batches_approved",
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    # ----------------------------
    # Edit request
    # ----------------------------
    edit_request_status = models.PositiveSmallIntegerField(
        choices=EDIT_REQUEST_CHOICES,
        default=EDIT_NONE,
        db_index=True,
    )
    edit_requested_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ob_edit_requests",
    )
    edit_requested_at = models.DateTimeField(null=True, blank=True)
    edit_request_reason = models.TextField(blank=True, default="")

    edit_approved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ob_edit_decisions",
    )
    edit_approved_at = models.DateTimeField(null=True, blank=True)
    edit_rejection_reason = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-opening_date", "-created_at"]
        verbose_name = "Opening Balance Batch"
        verbose_name_plural = "Opening Balance Batches"
        permissions = [
            ("submit_openingbalancebatch", "Can submit opening balance batch for approval"),
            ("approve_openingbalancebatch", "Can approve or reject opening balance batches"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(status__in=[1, 2, 3, 8]),
                name="chk_ob_batch_status_valid",
            ),
            models.CheckConstraint(
                condition=Q(edit_request_status__in=[0, 1, 2, 3]),
                name="chk_ob_batch_edit_status_valid",
            ),
            models.CheckConstraint(
                condition=~Q(edit_request_status=3) | Q(status=1),
                name="chk_ob_pending_edit_on_approved",
            ),
        ]

    def __str__(self):
        return f"{self.batch_no} ({self.get_status_display()})"

    def clean(self):
        self.batch_no = (self.batch_no or "").strip()
        self.notes = (self.notes or "").strip()
        if not self.batch_no:
            raise ValidationError({"batch_no": "batch_no is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
