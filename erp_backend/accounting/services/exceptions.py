# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for accounting services (and the modules that post
through them).

Every error carries:
- code: stable machine-readable error code surfaced by the API
- status_code: HTTP status the API layer responds with
"""

VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
DB_ERROR = "DB_ERROR"
PERMISSION_DENIED = "PERMISSION_DENIED"


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""

    code = DB_ERROR
    status_code = 500


class AccountResolutionError(AccountingServiceError):
    """Raised when a required ledger account is missing from the active chart."""

    code = CONFIGURATION_ERROR
    status_code = 400


class JournalEntryCreationError(AccountingServiceError):
    """Raised when a journal cannot be created (unbalanced, empty, bad amounts)."""

    code = VALIDATION_ERROR
    status_code = 400


class IdempotencyError(AccountingServiceError):
    """Raised when an active journal already exists for the same source."""

    code = VALIDATION_ERROR
    status_code = 400
