# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.models.account import Account


class AccountListSerializer(serializers.ModelSerializer):
    """
    Active-chart account row for pickers and GL drill-down.
    """

    account_type_name = serializers.CharField(source="get_account_type_display", read_only=True)
    normal_side = serializers.CharField(read_only=True)
    chart_code = serializers.CharField(source="chart.code", read_only=True)

    class Meta:
        model = Account
        fields = (
            "id",
            "chart_code",
            "code",
            "name",
            "account_type",
            "account_type_name",
            "normal_side",
            "is_active",
        )
        read_only_fields = fields
