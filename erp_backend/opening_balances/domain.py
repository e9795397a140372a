# opening_balances/domain.py

"""
PATH: opening_balances/domain.py

OPENING BALANCE DOMAIN (FRAMEWORK-AGNOSTIC)

Purpose:
- Single, authoritative validation + normalization layer for batch payloads.
- Used by BOTH:
  - DRF serializer validation (API layer)
  - batch store (service layer), which re-validates before writing

Rules:
- opening_date required, at least one line
- every line: party_type CUSTOMER | SUPPLIER, party_id > 0
- debit_foreign >= 0, credit_foreign >= 0, not both zero
- base currency lines always carry fx 1; other currencies carry the supplied
  fx (> 0) or None, to be resolved by the caller
- no duplicate (party_type, party_id) in one batch

Amounts are normalized to 4dp, rates to 6dp. Foreign and base amounts must
stay below 10^14 and rates below 10^12 (the integer digits the columns hold).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, List, Optional, Tuple

AMOUNT_QUANT = Decimal("0.0001")
RATE_QUANT = Decimal("0.000001")
ONE = Decimal("1.000000")
ZERO = Decimal("0.0000")
MAX_AMOUNT = Decimal("100000000000000")
MAX_RATE = Decimal("1000000000000")


class OpeningBalanceError(ValueError):
    """Raised when the opening balance payload is invalid."""


class PartyType(str, Enum):
    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"

    @classmethod
    def parse(cls, value) -> "PartyType":
        raw = (str(value) if value is not None else "").strip().upper()
        try:
            return cls(raw)
        except ValueError as exc:
            raise OpeningBalanceError("party_type must be CUSTOMER or SUPPLIER") from exc


def _to_decimal(
    value, quant: Decimal, *, label: str, limit: Decimal = MAX_AMOUNT
) -> Decimal:
    if value is None or value == "":
        return Decimal("0").quantize(quant)
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as e:
        raise OpeningBalanceError(f"Invalid {label}: {value!r}") from e
    if not d.is_finite() or abs(d) >= limit:
        raise OpeningBalanceError(f"Invalid {label}: {value!r}")
    try:
        return d.quantize(quant, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise OpeningBalanceError(f"Invalid {label}: {value!r}") from e


def _line_prefix(index: Optional[int]) -> str:
    return f"Line {index + 1}: " if index is not None else ""


@dataclass(frozen=True)
class OpeningBalanceLineInput:
    """
    One validated opening balance line (foreign amounts, 4dp).

    fx_rate_to_base is None only for a non-base currency whose rate the
    caller still has to resolve.
    """

    party_type: PartyType
    party_id: int
    currency_code: str
    fx_rate_to_base: Optional[Decimal]
    debit_foreign: Decimal
    credit_foreign: Decimal
    notes: str = ""

    @property
    def key(self) -> Tuple[str, int]:
        return (self.party_type.value, self.party_id)

    @property
    def debit_base(self) -> Decimal:
        return self._to_base(self.debit_foreign)

    @property
    def credit_base(self) -> Decimal:
        return self._to_base(self.credit_foreign)

    def _to_base(self, amount: Decimal) -> Decimal:
        if self.fx_rate_to_base is None:
            raise OpeningBalanceError(
                f"Exchange rate is required for currency {self.currency_code}"
            )
        raw = amount * self.fx_rate_to_base
        if abs(raw) < MAX_AMOUNT:
            based = raw.quantize(AMOUNT_QUANT, rounding=ROUND_HALF_UP)
            if abs(based) < MAX_AMOUNT:
                return based
        raise OpeningBalanceError(
            f"Base amount for {self.party_type.value} {self.party_id} exceeds the "
            "maximum of 99999999999999.9999"
        )

    def check_base_amounts(self) -> None:
        """Raise OpeningBalanceError if a base amount cannot be stored."""
        for amount in (self.debit_foreign, self.credit_foreign):
            self._to_base(amount)

    def with_rate(self, rate: Decimal) -> "OpeningBalanceLineInput":
        fx = _to_decimal(rate, RATE_QUANT, label="exchange rate", limit=MAX_RATE)
        return replace(self, fx_rate_to_base=fx)

    @staticmethod
    def from_raw(
        raw: dict,
        *,
        base_currency: str,
        index: int | None = None,
    ) -> "OpeningBalanceLineInput":
        prefix = _line_prefix(index)

        if not isinstance(raw, dict):
            raise OpeningBalanceError(f"{prefix}must be an object/dict")

        if not raw.get("party_type") or raw.get("party_id") in (None, ""):
            raise OpeningBalanceError(f"{prefix}Each line must have party_type and party_id")

        try:
            party_type = PartyType.parse(raw.get("party_type"))
        except OpeningBalanceError as exc:
            raise OpeningBalanceError(f"{prefix}{exc}") from exc

        try:
            party_id = int(str(raw.get("party_id")).strip())
        except (TypeError, ValueError) as exc:
            raise OpeningBalanceError(f"{prefix}party_id must be an integer") from exc
        if party_id <= 0:
            raise OpeningBalanceError(f"{prefix}party_id must be a positive integer")

        debit = _to_decimal(raw.get("debit_foreign"), AMOUNT_QUANT, label="debit amount")
        credit = _to_decimal(raw.get("credit_foreign"), AMOUNT_QUANT, label="credit amount")

        if debit < 0 or credit < 0:
            raise OpeningBalanceError(f"{prefix}Debit and credit amounts cannot be negative")
        if debit == 0 and credit == 0:
            raise OpeningBalanceError(
                f"{prefix}At least one of debit or credit must be greater than 0"
            )

        base = (base_currency or "").strip().upper()
        currency_code = (raw.get("currency_code") or "").strip().upper() or base

        if currency_code == base:
            fx = ONE
        else:
            raw_fx = raw.get("fx_rate_to_base")
            fx = None
            if raw_fx not in (None, ""):
                fx = _to_decimal(raw_fx, RATE_QUANT, label="exchange rate", limit=MAX_RATE)
                if fx <= 0:
                    raise OpeningBalanceError(
                        f"{prefix}Exchange rate must be greater than 0 for currency {currency_code}"
                    )

        line = OpeningBalanceLineInput(
            party_type=party_type,
            party_id=party_id,
            currency_code=currency_code,
            fx_rate_to_base=fx,
            debit_foreign=debit,
            credit_foreign=credit,
            notes=(raw.get("notes") or "").strip(),
        )
        if fx is not None:
            try:
                line.check_base_amounts()
            except OpeningBalanceError as exc:
                raise OpeningBalanceError(f"{prefix}{exc}") from exc
        return line


@dataclass(frozen=True)
class OpeningBalancePayload:
    """
    Validated batch payload (domain object).
    """

    opening_date: date
    notes: str
    lines: Tuple[OpeningBalanceLineInput, ...]

    @staticmethod
    def from_raw(
        *,
        opening_date,
        notes,
        raw_lines: Iterable[dict],
        base_currency: str,
    ) -> "OpeningBalancePayload":
        if not opening_date:
            raise OpeningBalanceError("Opening date is required")
        if not isinstance(opening_date, date):
            try:
                opening_date = date.fromisoformat(str(opening_date))
            except ValueError as exc:
                raise OpeningBalanceError("Opening date must be a valid date (YYYY-MM-DD)") from exc

        lines_list: List[OpeningBalanceLineInput] = []
        for i, raw in enumerate(raw_lines or []):
            lines_list.append(
                OpeningBalanceLineInput.from_raw(raw, base_currency=base_currency, index=i)
            )

        if not lines_list:
            raise OpeningBalanceError("At least one opening balance line is required")

        payload = OpeningBalancePayload(
            opening_date=opening_date,
            notes=(notes or "").strip(),
            lines=tuple(lines_list),
        )
        payload.validate_no_duplicate_parties()
        return payload

    def validate_no_duplicate_parties(self) -> None:
        seen = set()
        for line in self.lines:
            if line.key in seen:
                raise OpeningBalanceError(
                    "Duplicate party entries are not allowed in the same batch "
                    f"({line.party_type.value} {line.party_id})"
                )
            seen.add(line.key)

    def with_lines(self, lines: Iterable[OpeningBalanceLineInput]) -> "OpeningBalancePayload":
        return replace(self, lines=tuple(lines))
