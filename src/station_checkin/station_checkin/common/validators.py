from __future__ import annotations

import re
from typing import Any

from ..core.constants import MEMBER_NUMBER_LENGTH
from ..core.exceptions import ValidationError

_MEMBER_NUMBER_RE = re.compile(rf"^\d{{{MEMBER_NUMBER_LENGTH}}}$")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name}_required")
    return value.strip()


def optional_text(value: Any) -> str | None:
    """Trimmed string, or None for missing/blank input."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_member_number(value: Any) -> str:
    number = value.strip() if isinstance(value, str) else ""
    if not _MEMBER_NUMBER_RE.match(number):
        raise ValidationError("member_number_invalid")
    return number


def parse_id(value: Any) -> int | None:
    """Parse a positive integer id from request input; None when malformed."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text = str(value or "").strip()
    if not text.isdigit():
        return None
    parsed = int(text)
    return parsed if parsed > 0 else None


def require_id(value: Any, field_name: str) -> int:
    parsed = parse_id(value)
    if parsed is None:
        raise ValidationError(f"{field_name}_invalid")
    return parsed
