"""Validation helpers shared by the HTTP and console front ends."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError
from .models import MAX_AMOUNT_EXPONENT, amount_in_range


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a finite Decimal.

    The value is kept unrounded; cents rounding happens only on output.
    Negative amounts are kept as-is so refunds can be recorded.
    """
    if raw is None:
        raise ValidationError(f"{field} is required")
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if not amount_in_range(amount):
        raise ValidationError(f"{field} must be below 1e{MAX_AMOUNT_EXPONENT + 1}")

    return amount


def _as_text(value: object, field: str) -> str:
    # Scalars such as numbers are accepted and stored as their string form.
    if isinstance(value, (dict, list)):
        raise ValidationError(f"{field} must be a string")
    return value if isinstance(value, str) else str(value)


def validate_required_str(value: object, field: str) -> str:
    # Values are stored verbatim; categories and dates group by exact equality.
    if value is None:
        raise ValidationError(f"{field} is required")
    text = _as_text(value, field)
    if not text:
        raise ValidationError(f"{field} cannot be empty")
    return text


def validate_optional_str(value: object, field: str) -> str:
    if value is None:
        return ""
    return _as_text(value, field)


def parse_expense_id(raw: object) -> int:
    """Parse an expense id taken from a URL segment or command argument."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError("Missing expense ID")
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid expense ID: {raw}") from exc
