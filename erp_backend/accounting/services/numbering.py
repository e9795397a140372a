# PATH: accounting/services/numbering.py

"""
DOCUMENT NUMBERING

Human-readable, year-scoped sequential numbers (batch numbers, journal
numbers).

Numbers are NOT gap-free. Under concurrent creation two writers can compute
the same "next" number; the unique constraint on the number column rejects
the loser, which regenerates and retries (bounded).
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, TypeVar

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from accounting.services.exceptions import AccountingServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 5


class NumberingError(AccountingServiceError):
    """Raised when a unique document number could not be allocated."""


def max_sequence(values: Iterable[str], pattern: re.Pattern) -> int:
    """
    Highest integer captured by the `seq` group of `pattern` across values.
    Values that do not match are ignored.
    """
    best = 0
    for value in values:
        m = pattern.match(value or "")
        if not m:
            continue
        best = max(best, int(m.group("seq")))
    return best


def create_with_unique_number(
    *,
    generate: Callable[[], str],
    create: Callable[[str], T],
    is_taken: Callable[[str], bool],
    attempts: int = DEFAULT_ATTEMPTS,
    label: str = "document",
) -> T:
    """
    generate -> create inside a savepoint -> retry on number collision.

    Models that full_clean() on save report a taken number as ValidationError;
    a concurrent writer surfaces as IntegrityError. Either is retried when the
    number is taken, anything else is re-raised untouched.
    """
    last_number = None
    for attempt in range(1, attempts + 1):
        number = generate()
        last_number = number
        try:
            with transaction.atomic():
                return create(number)
        except (IntegrityError, ValidationError):
            if not is_taken(number):
                raise
            logger.warning(
                "Document number collision, retrying",
                extra={"label": label, "number": number, "attempt": attempt},
            )

    raise NumberingError(
        f"Could not allocate a unique {label} number after {attempts} attempts "
        f"(last tried {last_number})."
    )
