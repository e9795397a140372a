# accounting/api/serializers/journal_entries.py

from rest_framework import serializers

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine


class JournalLineSerializer(serializers.ModelSerializer):
    account_code = serializers.CharField(source="account.code", read_only=True)
    account_name = serializers.CharField(source="account.name", read_only=True)

    class Meta:
        model = JournalLine
        fields = (
            "id",
            "journal",
            "line_no",
            "account",
            "account_code",
            "account_name",
            "debit",
            "credit",
            "description",
            "entity_type",
            "entity_id",
            "created_at",
        )
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    reference = serializers.CharField(read_only=True)
    currency_code = serializers.CharField(source="currency.code", read_only=True, default=None)
    lines = JournalLineSerializer(many=True, read_only=True)

    class Meta:
        model = JournalEntry
        fields = (
            "id",
            "journal_number",
            "journal_date",
            "source_type",
            "source_id",
            "source_name",
            "reference",
            "memo",
            "currency",
            "currency_code",
            "exchange_rate",
            "total_amount",
            "created_by",
            "created_at",
            "is_deleted",
            "deleted_at",
            "superseded_by",
            "lines",
        )
        read_only_fields = fields
