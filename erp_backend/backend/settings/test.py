# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS

- In-memory SQLite
- Fast password hashing
- Throttling off (tests hammer endpoints)
- Deterministic accounting configuration
"""

from __future__ import annotations

from .base import *  # noqa: F403

DEBUG = False
TESTING = True

SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_CLASSES": (),
}

BASE_CURRENCY = "AED"
DEFAULT_COMPANY_ID = 1
ACCOUNTING_CONTROL_ACCOUNTS = {"AR": "1200", "AP": "2000", "EQUITY": "3000"}
OPENING_BALANCE_BATCH_PREFIX = "OB"
ERROR_DETAIL_ON_REQUEST = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"], "level": "CRITICAL"},
}

SENTRY_DSN = ""
