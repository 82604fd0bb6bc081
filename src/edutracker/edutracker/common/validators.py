from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_text(value: Optional[str], field_name: str, *, max_len: Optional[int] = None) -> Optional[str]:
    v = (value or "").strip()
    if not v:
        return None
    if max_len is not None and len(v) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return v
