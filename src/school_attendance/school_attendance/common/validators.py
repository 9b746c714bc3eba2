from __future__ import annotations

import re
from typing import Any

from ..core.constants import PIN_LENGTH
from ..core.exceptions import ValidationError

_PIN_RE = re.compile(rf"^[0-9]{{{PIN_LENGTH}}}$")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_str(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_pin(value: Any, field_name: str = "PIN") -> str:
    if not isinstance(value, str) or not _PIN_RE.match(value):
        raise ValidationError(f"{field_name} is required and must be exactly {PIN_LENGTH} digits")
    return value


def require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive integer")
    if number < 1:
        raise ValidationError(f"{field_name} must be a positive integer")
    return number


def require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} field must be boolean")
    return value
