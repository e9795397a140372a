# PATH: accounting/api/errors.py

"""
API ERROR RESPONSES

Every failure leaves the API as:

    {"detail": "<message>", "code": "<STABLE_CODE>"}

plus:
- "errors": field errors (serializer failures only)
- "hint": internal detail, ONLY when settings.DEBUG is on, or when the caller
  sends ?debug=1 and settings.ERROR_DETAIL_ON_REQUEST is enabled
"""

from __future__ import annotations

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import (
    DB_ERROR,
    PERMISSION_DENIED,
    VALIDATION_ERROR,
    AccountingServiceError,
)

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def wants_error_detail(request) -> bool:
    if settings.DEBUG:
        return True
    if not getattr(settings, "ERROR_DETAIL_ON_REQUEST", False):
        return False
    params = getattr(request, "query_params", None) or {}
    return str(params.get("debug", "")).strip().lower() in _TRUTHY


def error_response(
    request,
    *,
    detail: str,
    code: str,
    status_code: int,
    errors=None,
    hint: str | None = None,
) -> Response:
    body = {"detail": detail, "code": code}
    if errors is not None:
        body["errors"] = errors
    if hint and wants_error_detail(request):
        body["hint"] = hint
    return Response(body, status=status_code)


def service_error_response(request, exc: AccountingServiceError) -> Response:
    cause = exc.__cause__
    return error_response(
        request,
        detail=str(exc) or "Request could not be completed.",
        code=exc.code,
        status_code=exc.status_code,
        hint=f"{type(cause).__name__}: {cause}" if cause is not None else None,
    )


def validation_error_response(request, errors, detail: str = "Invalid request.") -> Response:
    return error_response(
        request,
        detail=detail,
        code=VALIDATION_ERROR,
        status_code=status.HTTP_400_BAD_REQUEST,
        errors=errors,
    )


def permission_denied_response(request, detail: str) -> Response:
    return error_response(
        request,
        detail=detail,
        code=PERMISSION_DENIED,
        status_code=status.HTTP_403_FORBIDDEN,
    )


def database_error_response(request, exc: Exception) -> Response:
    logger.exception(
        "Database error while handling request",
        extra={"path": getattr(request, "path", ""), "method": getattr(request, "method", "")},
    )
    return error_response(
        request,
        detail="A database error occurred.",
        code=DB_ERROR,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        hint=f"{type(exc).__name__}: {exc}",
    )
