from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} ไม่ถูกต้อง")
    return str(value).strip()


def require_non_negative(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} ต้องเป็นตัวเลข")
    if number < 0:
        raise ValidationError(f"{field_name} ต้องไม่ติดลบ")
    return number


def require_non_negative_number(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} ต้องเป็นตัวเลข")
    if number < 0:
        raise ValidationError(f"{field_name} ต้องไม่ติดลบ")
    return number
