from __future__ import annotations

from typing import Optional

from ..core.enums import Locale
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> str:
    text = value or ""
    if len(text) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return text


def require_int_range(value, field_name: str, *, low: int, high: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if number < low or number > high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def require_locale(value: Optional[str]) -> str:
    try:
        return Locale(str(value or "").lower()).value
    except ValueError:
        allowed = ", ".join(loc.value for loc in Locale)
        raise ValidationError(f"Locale must be one of: {allowed}") from None
