# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS (FAIL CLOSED)

Startup refuses to continue when:
- SECRET_KEY is missing or still the dev placeholder
- ALLOWED_HOSTS, CORS_ALLOWED_ORIGINS or CSRF_TRUSTED_ORIGINS are empty
- DATABASE_URL is missing or points at SQLite (ledger data is Postgres-only)
- any trusted origin is plain http:// or localhost

Everything else (HSTS, SSL redirect, connection age) is env-tunable.
Error hints stay off unless ERROR_DETAIL_ON_REQUEST is set explicitly.
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import BASE_DIR, MIDDLEWARE, env  # explicit for Ruff (F405)

DEBUG = False


def _required(value, message: str):
    if not value:
        raise ImproperlyConfigured(message)
    return value


def _https_origins(name: str) -> list[str]:
    origins = _required(env.list(name, default=[]), f"{name} must be set in production.")
    for origin in origins:
        if origin.startswith("http://"):
            raise ImproperlyConfigured(f"{name} must be https:// in production ({origin}).")
        if "localhost" in origin or "127.0.0.1" in origin:
            raise ImproperlyConfigured(f"Remove localhost from {name} in production.")
    return origins


# ----------------------------
# Identity
# ----------------------------
SECRET_KEY = (env("SECRET_KEY", default="") or "").strip()
if SECRET_KEY in ("", "dev-insecure-change-me"):
    raise ImproperlyConfigured("SECRET_KEY must be set to a strong value in production.")

ALLOWED_HOSTS = _required(
    env.list("ALLOWED_HOSTS", default=[]), "ALLOWED_HOSTS must be set in production."
)

# ----------------------------
# Database (Postgres only)
# ----------------------------
_database_url = _required(
    (env("DATABASE_URL", default="") or "").strip(),
    "DATABASE_URL must be set in production (Postgres).",
)
if _database_url.startswith("sqlite"):
    raise ImproperlyConfigured("Refusing to start in production with SQLite DATABASE_URL.")

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)
DATABASES["default"]["ATOMIC_REQUESTS"] = False

# ----------------------------
# Static files (WhiteNoise)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ----------------------------
# Transport security
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ----------------------------
# CORS / CSRF
# ----------------------------
CORS_ALLOWED_ORIGINS = _https_origins("CORS_ALLOWED_ORIGINS")
CSRF_TRUSTED_ORIGINS = _https_origins("CSRF_TRUSTED_ORIGINS")
CORS_ALLOW_CREDENTIALS = False

# ----------------------------
# API error detail
# ----------------------------
ERROR_DETAIL_ON_REQUEST = env.bool("ERROR_DETAIL_ON_REQUEST", default=False)
