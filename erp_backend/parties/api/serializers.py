# parties/api/serializers.py

from rest_framework import serializers

from parties.models import Party


class PartySearchSerializer(serializers.ModelSerializer):
    """
    Picker row: what the opening balance line editor needs.
    """

    name = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = Party
        fields = ("id", "name", "currency_code", "email", "phone")
        read_only_fields = fields
