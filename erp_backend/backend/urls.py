# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/

- /api/accounting/        chart accounts + read-only GL journals
- /api/opening-balances/  batch workflow, party pickers, exchange-rate lookup
- /api/health/            DB round-trip + posting configuration (AllowAny)
- /api/schema/, /api/docs/  OpenAPI via drf-spectacular

The Django admin path comes from ADMIN_PATH (default "admin/") so production
can move it off the well-known URL.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import DatabaseError, connections
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from accounting.services.account_resolver import get_opening_balance_accounts
from accounting.services.exceptions import AccountResolutionError

API_INDEX = {
    "message": "ERP Backend API is running",
    "auth": {
        "jwt_create": "/api/auth/jwt/create/",
        "jwt_refresh": "/api/auth/jwt/refresh/",
    },
    "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
    "modules": {
        "accounting": "/api/accounting/",
        "opening_balances": "/api/opening-balances/",
    },
}


@extend_schema(responses={200: {"type": "object"}})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(API_INDEX)


@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
                "posting_accounts": {"type": "string"},
            },
        },
        503: {"type": "object"},
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    - db: SELECT 1 on the default connection
    - posting_accounts: AR / AP / Equity resolvable in the active chart.
      Missing accounts degrade the report but do not fail it; only approvals
      depend on them.
    """
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except DatabaseError as e:
        return Response({"status": "degraded", "db": "down", "error": str(e)}, status=503)

    body = {"status": "ok", "db": "ok", "posting_accounts": "ok"}
    try:
        get_opening_balance_accounts()
    except AccountResolutionError as e:
        body.update(status="degraded", posting_accounts="missing", error=str(e))
    return Response(body)


ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # JWT (SimpleJWT)
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    # Modules
    path("accounting/", include("accounting.api.urls")),
    path("opening-balances/", include("opening_balances.api.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
