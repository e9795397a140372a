# opening_balances/services/exceptions.py

"""
OPENING BALANCE SERVICE ERRORS

Built on the accounting error hierarchy so the API layer maps every failure
to the same {"detail", "code"} shape:
- OpeningBalanceValidationError -> VALIDATION_ERROR (400)
- BatchNotFoundError            -> NOT_FOUND (404): missing batch, or batch
                                   not in the status the action requires
Control-account problems surface as AccountResolutionError
(CONFIGURATION_ERROR, 400).
"""

from accounting.services.exceptions import (
    NOT_FOUND,
    VALIDATION_ERROR,
    AccountingServiceError,
)


class OpeningBalanceServiceError(AccountingServiceError):
    """Base exception for opening balance workflow failures."""

    code = VALIDATION_ERROR
    status_code = 400


class OpeningBalanceValidationError(OpeningBalanceServiceError):
    """Raised when a payload or a transition precondition is invalid."""


class BatchNotFoundError(OpeningBalanceServiceError):
    """Raised when the batch does not exist or is not in the required status."""

    code = NOT_FOUND
    status_code = 404
