# PATH: opening_balances/api/views.py

"""
PATH: opening_balances/api/views.py

OPENING BALANCE API

Batches:
GET  /api/opening-balances/batches/                          view_openingbalancebatch
POST /api/opening-balances/batches/                          add_openingbalancebatch
GET  /api/opening-balances/batches/<id>/                     view_openingbalancebatch
PUT  /api/opening-balances/batches/<id>/                     change_openingbalancebatch
POST /api/opening-balances/batches/<id>/submit/              submit_openingbalancebatch
POST /api/opening-balances/batches/<id>/approve/             approve_openingbalancebatch
POST /api/opening-balances/batches/<id>/reject/              approve_openingbalancebatch
POST /api/opening-balances/batches/<id>/cancel/              delete_openingbalancebatch
POST /api/opening-balances/batches/<id>/request-edit/        authenticated
POST /api/opening-balances/batches/<id>/decide-edit-request/ approve_openingbalancebatch
GET  /api/opening-balances/batches/<id>/history/             view_openingbalancebatch
GET  /api/opening-balances/batches/<id>/journal-entries/     view_openingbalancebatch

Lookups:
GET  /api/opening-balances/exchange-rate/?currency=USD&date=2026-01-01

Notes:
- No is_staff checks; group/user permissions honored via has_perm
- Services own every rule; views only translate errors into responses
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import (
    database_error_response,
    error_response,
    permission_denied_response,
    service_error_response,
    validation_error_response,
)
from accounting.api.serializers import JournalLineSerializer
from accounting.services.exceptions import NOT_FOUND, AccountingServiceError
from accounting.services.fx_service import resolve_rate
from history.services import history_for
from opening_balances.api.filters import OpeningBalanceBatchFilter
from opening_balances.api.serializers import (
    CommentSerializer,
    EditDecisionSerializer,
    ExchangeRateQuerySerializer,
    HistoryEntrySerializer,
    OpeningBalanceBatchDetailSerializer,
    OpeningBalanceBatchListSerializer,
    OpeningBalanceBatchWriteSerializer,
    ReasonSerializer,
)
from opening_balances.models import OpeningBalanceBatch
from opening_balances.services import batch_store, workflow
from opening_balances.services.batch_store import HISTORY_MODULE
from opening_balances.services.queries import (
    active_journal_lines,
    batch_detail_queryset,
    batch_list_queryset,
)
from parties.services.directory import display_names

VIEW_PERMISSION = "opening_balances.view_openingbalancebatch"
ADD_PERMISSION = "opening_balances.add_openingbalancebatch"
CHANGE_PERMISSION = "opening_balances.change_openingbalancebatch"
DELETE_PERMISSION = "opening_balances.delete_openingbalancebatch"
SUBMIT_PERMISSION = "opening_balances.submit_openingbalancebatch"
APPROVE_PERMISSION = "opening_balances.approve_openingbalancebatch"

ACTION_RESPONSE = {
    "type": "object",
    "properties": {"message": {"type": "string"}},
}


def _django_errors(exc: DjangoValidationError):
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return {"non_field_errors": exc.messages}


def _call(request, func, **kwargs):
    """
    Run a service call, returning (result, None) or (None, error_response).
    """
    try:
        return func(**kwargs), None
    except AccountingServiceError as exc:
        return None, service_error_response(request, exc)
    except DjangoValidationError as exc:
        return None, validation_error_response(request, _django_errors(exc))
    except DatabaseError as exc:
        return None, database_error_response(request, exc)


def _not_found(request):
    return error_response(
        request,
        detail="Opening balance batch not found",
        code=NOT_FOUND,
        status_code=status.HTTP_404_NOT_FOUND,
    )


def _detail_data(batch):
    names = display_names([(line.party_type, line.party_id) for line in batch.lines.all()])
    return OpeningBalanceBatchDetailSerializer(batch, context={"party_names": names}).data


def _write_kwargs(data) -> dict:
    return {
        "opening_date": data["opening_date"],
        "notes": data.get("notes", ""),
        "lines": [dict(line) for line in data["lines"]],
    }


# ------------------------------------------------------------
# BATCHES
# ------------------------------------------------------------


class OpeningBalanceBatchListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OpeningBalanceBatchWriteSerializer
    filterset_class = OpeningBalanceBatchFilter

    def get_queryset(self):
        return batch_list_queryset()

    @extend_schema(
        tags=["opening-balances"],
        responses=OpeningBalanceBatchListSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to view opening balances."
            )

        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        if page is not None:
            data = OpeningBalanceBatchListSerializer(page, many=True).data
            return self.get_paginated_response(data)

        return Response(OpeningBalanceBatchListSerializer(qs, many=True).data)

    @extend_schema(
        tags=["opening-balances"],
        request=OpeningBalanceBatchWriteSerializer,
        responses={201: dict, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(ADD_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to create opening balances."
            )

        s = self.get_serializer(data=request.data)
        if not s.is_valid():
            return validation_error_response(request, s.errors)

        batch, error = _call(
            request,
            batch_store.create_batch,
            acting_user=request.user,
            **_write_kwargs(s.validated_data),
        )
        if error is not None:
            return error

        return Response(
            {
                "id": batch.pk,
                "batch_no": batch.batch_no,
                "message": "Opening balance batch created successfully",
            },
            status=status.HTTP_201_CREATED,
        )


class OpeningBalanceBatchDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OpeningBalanceBatchWriteSerializer

    def get_queryset(self):
        return batch_detail_queryset()

    @extend_schema(
        tags=["opening-balances"],
        responses=OpeningBalanceBatchDetailSerializer,
    )
    def get(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to view opening balances."
            )

        batch = self.get_queryset().filter(pk=pk).first()
        if batch is None:
            return _not_found(request)

        return Response(_detail_data(batch), status=status.HTTP_200_OK)

    @extend_schema(
        tags=["opening-balances"],
        request=OpeningBalanceBatchWriteSerializer,
        responses={200: OpeningBalanceBatchDetailSerializer, 400: dict, 404: dict},
    )
    def put(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(CHANGE_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to edit opening balances."
            )

        s = self.get_serializer(data=request.data)
        if not s.is_valid():
            return validation_error_response(request, s.errors)

        batch, error = _call(
            request,
            batch_store.update_batch,
            batch_id=pk,
            acting_user=request.user,
            **_write_kwargs(s.validated_data),
        )
        if error is not None:
            return error

        batch = self.get_queryset().get(pk=batch.pk)
        return Response(_detail_data(batch), status=status.HTTP_200_OK)


# ------------------------------------------------------------
# TRANSITIONS
# ------------------------------------------------------------


class SubmitBatchView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = None

    @extend_schema(tags=["opening-balances"], request=None, responses=ACTION_RESPONSE)
    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(SUBMIT_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to submit opening balances."
            )

        _, error = _call(request, workflow.submit, batch_id=pk, acting_user=request.user)
        if error is not None:
            return error

        return Response({"message": "Batch submitted for approval"}, status=status.HTTP_200_OK)


class ApproveBatchView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CommentSerializer

    @extend_schema(
        tags=["opening-balances"],
        request=CommentSerializer,
        responses={
            200: {
                "type": "object",
                "properties": {
                    "message": {"type": "string"},
                    "gl_journal_id": {"type": "integer"},
                },
            }
        },
    )
    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(APPROVE_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to approve opening balances."
            )

        s = self.get_serializer(data=request.data)
        if not s.is_valid():
            return validation_error_response(request, s.errors)

        result, error = _call(
            request,
            workflow.approve,
            batch_id=pk,
            acting_user=request.user,
            comment=s.validated_data.get("comment"),
        )
        if error is not None:
            return error

        _, journal = result
        return Response(
            {"message": "Batch approved and posted to GL", "gl_journal_id": journal.pk},
            status=status.HTTP_200_OK,
        )


class RejectBatchView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReasonSerializer

    @extend_schema(tags=["opening-balances"], request=ReasonSerializer, responses=ACTION_RESPONSE)
    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(APPROVE_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to reject opening balances."
            )

        s = self.get_serializer(data=request.data)
        if not s.is_valid():
            return validation_error_response(request, s.errors)

        _, error = _call(
            request,
            workflow.reject,
            batch_id=pk,
            acting_user=request.user,
            reason=s.validated_data.get("reason"),
        )
        if error is not None:
            return error

        return Response({"message": "Batch rejected"}, status=status.HTTP_200_OK)


class CancelBatchView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = None

    @extend_schema(tags=["opening-balances"], request=None, responses=ACTION_RESPONSE)
    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(DELETE_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to cancel opening balances."
            )

        _, error = _call(request, batch_store.cancel_batch, batch_id=pk, acting_user=request.user)
        if error is not None:
            return error

        return Response({"message": "Batch cancelled"}, status=status.HTTP_200_OK)


class RequestEditView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReasonSerializer

    @extend_schema(tags=["opening-balances"], request=ReasonSerializer, responses=ACTION_RESPONSE)
    def post(self, request, pk, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        if not s.is_valid():
            return validation_error_response(request, s.errors)

        _, error = _call(
            request,
            workflow.request_edit,
            batch_id=pk,
            acting_user=request.user,
            reason=s.validated_data.get("reason"),
        )
        if error is not None:
            return error

        return Response({"message": "Edit request submitted"}, status=status.HTTP_200_OK)


class DecideEditRequestView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = EditDecisionSerializer

    @extend_schema(
        tags=["opening-balances"],
        request=EditDecisionSerializer,
        responses=ACTION_RESPONSE,
    )
    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(APPROVE_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to decide edit requests."
            )

        s = self.get_serializer(data=request.data)
        if not s.is_valid():
            return validation_error_response(request, s.errors)

        batch, error = _call(
            request,
            workflow.decide_edit_request,
            batch_id=pk,
            acting_user=request.user,
            decision=s.validated_data["decision"],
            reason=s.validated_data.get("reason"),
        )
        if error is not None:
            return error

        if batch.edit_request_status == batch.EDIT_APPROVED:
            message = "Edit request approved; batch reopened as Draft"
        else:
            message = "Edit request rejected"
        return Response({"message": message}, status=status.HTTP_200_OK)


# ------------------------------------------------------------
# AUDIT / GL
# ------------------------------------------------------------


class BatchHistoryView(GenericAPIView):
    """
    History outlives the batch: a cancelled batch still answers here.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = HistoryEntrySerializer
    pagination_class = None

    @extend_schema(tags=["opening-balances"], responses=HistoryEntrySerializer(many=True))
    def get(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to view opening balances."
            )

        rows = history_for(HISTORY_MODULE, pk).order_by("created_at", "id")
        return Response(HistoryEntrySerializer(rows, many=True).data, status=status.HTTP_200_OK)


class BatchJournalEntriesView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = JournalLineSerializer
    pagination_class = None

    @extend_schema(
        tags=["opening-balances"],
        responses={
            200: {
                "type": "object",
                "properties": {"data": {"type": "array", "items": {"type": "object"}}},
            }
        },
    )
    def get(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return permission_denied_response(
                request, "You do not have permission to view opening balances."
            )

        batch = OpeningBalanceBatch.objects.filter(pk=pk).first()
        if batch is None:
            return _not_found(request)

        rows = active_journal_lines(batch)
        return Response(
            {"data": JournalLineSerializer(rows, many=True).data},
            status=status.HTTP_200_OK,
        )


# ------------------------------------------------------------
# LOOKUPS
# ------------------------------------------------------------


class ExchangeRateLookupView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ExchangeRateQuerySerializer
    pagination_class = None

    @extend_schema(
        tags=["opening-balances"],
        parameters=[
            OpenApiParameter(name="currency", type=str, required=True),
            OpenApiParameter(name="date", type=str, required=True, description="YYYY-MM-DD"),
        ],
        responses={
            200: {
                "type": "object",
                "properties": {
                    "currency_code": {"type": "string"},
                    "date": {"type": "string"},
                    "rate_to_base": {"type": "string", "nullable": True},
                    "found": {"type": "boolean"},
                },
            }
        },
    )
    def get(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.query_params)
        if not s.is_valid():
            return validation_error_response(
                request, s.errors, detail="currency and date are required"
            )

        code = s.validated_data["currency"].strip().upper()
        on_date = s.validated_data["date"]
        rate = resolve_rate(code, on_date)

        return Response(
            {
                "currency_code": code,
                "date": on_date.isoformat(),
                "rate_to_base": str(rate) if rate is not None else None,
                "found": rate is not None,
            },
            status=status.HTTP_200_OK,
        )
