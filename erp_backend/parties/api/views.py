# parties/api/views.py

"""
PARTY SEARCH API (READ-ONLY)

GET /api/opening-balances/customers/search/?q=
GET /api/opening-balances/vendors/search/?q=

Active parties only, ordered by name, at most 50 rows.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from parties.api.serializers import PartySearchSerializer
from parties.models import Party
from parties.services.directory import search_parties

SEARCH_PARAMS = [
    OpenApiParameter(
        name="q",
        type=str,
        required=False,
        description="Matches display name or email (case-insensitive).",
    ),
]


class _PartySearchView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PartySearchSerializer
    pagination_class = None
    party_type = None

    def get(self, request, *args, **kwargs):
        rows = search_parties(self.party_type, request.query_params.get("q", ""))
        return Response(PartySearchSerializer(rows, many=True).data, status=status.HTTP_200_OK)


@extend_schema(
    tags=["opening-balances"],
    parameters=SEARCH_PARAMS,
    responses=PartySearchSerializer(many=True),
)
class CustomerSearchView(_PartySearchView):
    party_type = Party.CUSTOMER


@extend_schema(
    tags=["opening-balances"],
    parameters=SEARCH_PARAMS,
    responses=PartySearchSerializer(many=True),
)
class VendorSearchView(_PartySearchView):
    party_type = Party.SUPPLIER
