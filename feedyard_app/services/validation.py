"""
Input validation shared by the ration engine and the activity ledger.

Hard failures raise ``ValidationError`` or ``NotFoundError``; soft problems
(a zero head count on an activity entry) are reported as ``ValidationIssue``
warnings and never block the write.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from ..config.limits import DATE_FORMAT


class ValidationError(Exception):
    """Bad input shape or range. The caller corrects the input and retries."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(Exception):
    """A referenced pen, ration, schedule or activity does not exist."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationSeverity(Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: ValidationSeverity
    message: str
    value: float | None = None
    limit: float | None = None


def safe_divide(a: float, b: float, default: float = 0.0) -> float:
    """Avoid zero divisions (empty pens, no recorded cost)."""
    if b == 0:
        return default
    return a / b


def normalize_date(value: date | datetime | str | None, field_name: str = "date") -> str:
    """
    Return ``value`` as a ``YYYY-MM-DD`` string.

    Accepts ``date``/``datetime`` objects and ISO strings with or without a
    time part; the time of day is dropped so stored dates compare correctly
    as strings.
    """
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required.")
    if isinstance(value, datetime):
        return value.date().strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    text = str(value).strip()
    try:
        if len(text) == 10:
            return datetime.strptime(text, DATE_FORMAT).strftime(DATE_FORMAT)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().strftime(DATE_FORMAT)
    except ValueError as exc:
        raise ValidationError(f"{field_name} '{value}' is not an ISO date (YYYY-MM-DD).") from exc


def require_text(value: str | None, field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} is required.")
    return text


def require_number(value: object, field_name: str, *, minimum: float = 0.0, strict: bool = False) -> float:
    """
    Coerce ``value`` to a finite float and check it against ``minimum``.

    With ``strict`` the value must be greater than ``minimum``, otherwise
    greater than or equal.
    """
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be a number.") from exc
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field_name} must be a finite number.")
    if strict and number <= minimum:
        raise ValidationError(f"{field_name} must be greater than {minimum:g}.")
    if not strict and number < minimum:
        raise ValidationError(f"{field_name} must not be less than {minimum:g}.")
    return number


def require_head_count(value: object, field_name: str = "Head count", *, allow_zero: bool = False) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number.")
    number = require_number(value, field_name, minimum=0.0, strict=not allow_zero)
    if number != int(number):
        raise ValidationError(f"{field_name} must be a whole number.")
    return int(number)
