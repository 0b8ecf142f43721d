from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ..core.constants import MAX_HOURS_PER_ENTRY
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def parse_hours(value) -> Decimal:
    """Parse an hours amount entered by a user: 0 < hours <= 24."""
    try:
        hours = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        raise ValidationError("Hours must be a number")
    if not hours.is_finite() or hours <= 0:
        raise ValidationError("Hours must be greater than 0")
    if hours > MAX_HOURS_PER_ENTRY:
        raise ValidationError(f"Hours cannot exceed {MAX_HOURS_PER_ENTRY}")
    return hours


def parse_optional_hours(value) -> Decimal | None:
    if value is None or str(value).strip() == "":
        return None
    try:
        hours = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        raise ValidationError("Hours must be a number")
    if not hours.is_finite() or hours < 0:
        raise ValidationError("Hours cannot be negative")
    return hours
