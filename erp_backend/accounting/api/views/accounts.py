# accounting/api/views/accounts.py

"""
PATH: accounting/api/views/accounts.py

ACTIVE CHART ACCOUNTS API (READ-ONLY)

GET /api/accounting/accounts/
Returns accounts for the ACTIVE chart only (chart-aware), read-only.

- Permission-gated: requires accounting.view_account
- No chart_id parameter: prevents chart enumeration
- Missing / ambiguous active chart -> 400 CONFIGURATION_ERROR
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import permission_denied_response, service_error_response
from accounting.api.serializers.accounts import AccountListSerializer
from accounting.models.account import Account
from accounting.services.account_resolver import get_active_chart
from accounting.services.exceptions import AccountResolutionError


class ActiveChartAccountsView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountListSerializer

    @extend_schema(
        tags=["accounting"],
        responses=AccountListSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm("accounting.view_account"):
            return permission_denied_response(
                request, "You do not have permission to view accounts."
            )

        try:
            chart = get_active_chart()
        except AccountResolutionError as exc:
            return service_error_response(request, exc)

        qs = (
            Account.objects.filter(chart=chart, is_active=True)
            .select_related("chart")
            .order_by("code")
        )

        return Response(AccountListSerializer(qs, many=True).data, status=status.HTTP_200_OK)
