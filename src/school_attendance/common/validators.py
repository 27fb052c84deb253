from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number


def parse_status(value: Optional[str], *, default: AttendanceStatus) -> AttendanceStatus:
    """Map a raw status string onto the closed enumeration."""
    if value is None or value == "":
        return default
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value))
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {value!r}")
