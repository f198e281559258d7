from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} tidak boleh kosong")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} minimal {min_len} karakter")
    return value


def optional_stripped(value: Optional[str]) -> Optional[str]:
    """Blank strings are stored as NULL."""
    if value is None:
        return None
    value = value.strip()
    return value or None
