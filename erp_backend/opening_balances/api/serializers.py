# PATH: opening_balances/api/serializers.py

"""
OPENING BALANCE SERIALIZERS

Input serializers validate shape and run the same domain rules the batch store
applies again before writing. Output serializers are read-only DB truth.
"""

from rest_framework import serializers

from accounting.services.fx_service import base_currency_code
from history.models import HistoryEntry
from opening_balances.domain import OpeningBalanceError, OpeningBalancePayload
from opening_balances.models import OpeningBalanceBatch, OpeningBalanceLine


def _user_name(user):
    if user is None:
        return None
    full = (user.get_full_name() or "").strip()
    return full or user.get_username()


# ------------------------------------------------------------
# INPUT
# ------------------------------------------------------------


class OpeningBalanceLineInputSerializer(serializers.Serializer):
    party_type = serializers.ChoiceField(choices=OpeningBalanceLine.PARTY_TYPES)
    party_id = serializers.IntegerField(min_value=1)
    currency_code = serializers.CharField(max_length=10, required=False, allow_blank=True)
    fx_rate_to_base = serializers.DecimalField(
        max_digits=18, decimal_places=6, required=False, allow_null=True
    )
    debit_foreign = serializers.DecimalField(
        max_digits=18, decimal_places=4, required=False, default=0, min_value=0
    )
    credit_foreign = serializers.DecimalField(
        max_digits=18, decimal_places=4, required=False, default=0, min_value=0
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not (attrs.get("debit_foreign") or 0) > 0 and not (attrs.get("credit_foreign") or 0) > 0:
            raise serializers.ValidationError(
                "At least one of debit or credit must be greater than 0"
            )
        return attrs


class OpeningBalanceBatchWriteSerializer(serializers.Serializer):
    """
    Create / full update payload.
    """

    opening_date = serializers.DateField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    lines = OpeningBalanceLineInputSerializer(many=True)

    def validate_lines(self, value):
        if not value:
            raise serializers.ValidationError("At least one opening balance line is required")
        return value

    def validate(self, attrs):
        try:
            OpeningBalancePayload.from_raw(
                opening_date=attrs["opening_date"],
                notes=attrs.get("notes"),
                raw_lines=[dict(line) for line in attrs["lines"]],
                base_currency=base_currency_code(),
            )
        except OpeningBalanceError as exc:
            raise serializers.ValidationError({"lines": [str(exc)]}) from exc
        return attrs


class CommentSerializer(serializers.Serializer):
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EditDecisionSerializer(serializers.Serializer):
    decision = serializers.CharField()
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ExchangeRateQuerySerializer(serializers.Serializer):
    currency = serializers.CharField(max_length=10)
    date = serializers.DateField()


# ------------------------------------------------------------
# OUTPUT
# ------------------------------------------------------------


class OpeningBalanceLineSerializer(serializers.ModelSerializer):
    party_name = serializers.SerializerMethodField()

    class Meta:
        model = OpeningBalanceLine
        fields = (
            "id",
            "party_type",
            "party_id",
            "party_name",
            "currency",
            "currency_code",
            "fx_rate_to_base",
            "debit_foreign",
            "credit_foreign",
            "debit_base",
            "credit_base",
            "notes",
        )
        read_only_fields = fields

    def get_party_name(self, obj):
        names = self.context.get("party_names") or {}
        return names.get((obj.party_type, obj.party_id))


class OpeningBalanceBatchListSerializer(serializers.ModelSerializer):
    status_name = serializers.CharField(source="get_status_display", read_only=True)
    edit_request_status_name = serializers.CharField(
        source="get_edit_request_status_display", read_only=True
    )
    created_by_name = serializers.SerializerMethodField()
    approved_by_name = serializers.SerializerMethodField()
    gl_journal_number = serializers.CharField(
        source="gl_journal.journal_number", read_only=True, default=None
    )
    total_lines = serializers.IntegerField(read_only=True)
    customer_total = serializers.DecimalField(max_digits=18, decimal_places=4, read_only=True)
    supplier_total = serializers.DecimalField(max_digits=18, decimal_places=4, read_only=True)

    class Meta:
        model = OpeningBalanceBatch
        fields = (
            "id",
            "company_id",
            "batch_no",
            "opening_date",
            "notes",
            "status",
            "status_name",
            "edit_request_status",
            "edit_request_status_name",
            "gl_journal",
            "gl_journal_number",
            "total_lines",
            "customer_total",
            "supplier_total",
            "created_by_name",
            "created_at",
            "approved_by_name",
            "approved_at",
        )
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return _user_name(obj.created_by)

    def get_approved_by_name(self, obj):
        return _user_name(obj.approved_by)


class OpeningBalanceBatchDetailSerializer(serializers.ModelSerializer):
    status_name = serializers.CharField(source="get_status_display", read_only=True)
    edit_request_status_name = serializers.CharField(
        source="get_edit_request_status_display", read_only=True
    )
    created_by_name = serializers.SerializerMethodField()
    updated_by_name = serializers.SerializerMethodField()
    approved_by_name = serializers.SerializerMethodField()
    edit_requested_by_name = serializers.SerializerMethodField()
    edit_approved_by_name = serializers.SerializerMethodField()
    gl_journal_number = serializers.CharField(
        source="gl_journal.journal_number", read_only=True, default=None
    )
    lines = OpeningBalanceLineSerializer(many=True, read_only=True)

    class Meta:
        model = OpeningBalanceBatch
        fields = (
            "id",
            "company_id",
            "batch_no",
            "opening_date",
            "notes",
            "status",
            "status_name",
            "gl_journal",
            "gl_journal_number",
            "created_by_name",
            "created_at",
            "updated_by_name",
            "updated_at",
            "approved_by_name",
            "approved_at",
            "edit_request_status",
            "edit_request_status_name",
            "edit_requested_by_name",
            "edit_requested_at",
            "edit_request_reason",
            "edit_approved_by_name",
            "edit_approved_at",
            "edit_rejection_reason",
            "lines",
        )
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return _user_name(obj.created_by)

    def get_updated_by_name(self, obj):
        return _user_name(obj.updated_by)

    def get_approved_by_name(self, obj):
        return _user_name(obj.approved_by)

    def get_edit_requested_by_name(self, obj):
        return _user_name(obj.edit_requested_by)

    def get_edit_approved_by_name(self, obj):
        return _user_name(obj.edit_approved_by)


class HistoryEntrySerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = HistoryEntry
        fields = ("id", "action", "details", "user", "user_name", "created_at")
        read_only_fields = fields

    def get_user_name(self, obj):
        return _user_name(obj.user)
