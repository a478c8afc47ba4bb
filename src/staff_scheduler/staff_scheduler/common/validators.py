from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

EMAIL_RE = re.compile(r"^[\w\-.]+@([\w-]+\.)+[\w-]{2,4}$", re.ASCII)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_length(value: Optional[str], field_name: str, min_len: int, max_len: int) -> str:
    text = require_non_empty(value, field_name)
    if len(text) < min_len or len(text) > max_len:
        raise ValidationError(f"{field_name} must be between {min_len} and {max_len} characters")
    return text


def optional_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if len(text) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return text or None


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("Please provide a valid email")
    return email


def normalize_phone(value: Optional[str]) -> Optional[str]:
    """Local numbers ``0XXXXXXXXX`` become ``+251XXXXXXXXX``."""
    if value is None or not str(value).strip():
        return None
    phone = re.sub(r"[\s\-()]", "", str(value).strip())
    if re.fullmatch(r"0\d{9}", phone):
        phone = "+251" + phone[1:]
    if not re.fullmatch(r"\+?\d{10,15}", phone):
        raise ValidationError("Please provide a valid phone number")
    return phone


def parse_enum(enum_cls: Type[E], value, field_name: str, *, default: Optional[E] = None) -> E:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}") from e


def parse_number(value, field_name: str, *, minimum: float, maximum: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} must be a number") from e
    if number < minimum or number > maximum:
        raise ValidationError(f"{field_name} must be between {minimum:g} and {maximum:g}")
    return number


def parse_positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} is invalid") from e
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number
