from __future__ import annotations

from ..core.exceptions import ConfigurationError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ConfigurationError(f"{field_name} is required")
    return value.strip()


def require_non_negative(value: float, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def require_positive_int(value: int, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number


def require_bool(value: object, field_name: str) -> bool:
    # JSON booleans only: the string "false" is rejected, not read as true.
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value
