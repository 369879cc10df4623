from __future__ import annotations

from typing import Any

from ..core.exceptions import InvalidAmountError, ValidationError
from .datetime_utils import to_iso


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_iso_date(value: Any, field_name: str = "date") -> str:
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return to_iso(value)
    except (AttributeError, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def clamp_non_negative(value: Any) -> int:
    """Lenient parse used for the initial pack: bad input counts as 0."""
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _as_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise InvalidAmountError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        try:
            return int(value.strip())
        except ValueError:
            raise InvalidAmountError(f"{field_name} must be an integer") from None
    raise InvalidAmountError(f"{field_name} must be an integer")


def require_positive_int(value: Any, field_name: str = "amount") -> int:
    amount = _as_int(value, field_name)
    if amount < 1:
        raise InvalidAmountError(f"{field_name} must be at least 1")
    return amount


def require_non_negative_int(value: Any, field_name: str = "amount") -> int:
    amount = _as_int(value, field_name)
    if amount < 0:
        raise InvalidAmountError(f"{field_name} cannot be negative")
    return amount
