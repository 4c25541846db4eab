from __future__ import annotations

import math
import re
from typing import Any, Iterable, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required", errors={field_name: f"{field_name} is required"})
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(str(value).strip()) < min_len:
        msg = f"{field_name} must be at least {min_len} characters"
        raise ValidationError(msg, errors={field_name: msg})
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    """Empty string and omission are the same thing for optional fields."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def optional_email(value: Any, field_name: str = "email") -> Optional[str]:
    email = optional_text(value)
    if email is not None and not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email address", errors={field_name: "Invalid email address"})
    return email


def require_int(value: Any, field_name: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required", errors={field_name: f"{field_name} is required"})
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer", errors={field_name: "must be an integer"})
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", errors={field_name: "must be an integer"})


def code_list(value: Any, field_name: str = "courses") -> list[str]:
    """Normalize a course-code list, dropping blanks and duplicates (order kept)."""
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ValidationError(f"{field_name} must be a list", errors={field_name: "must be a list of codes"})

    out: list[str] = []
    for item in value:
        code = optional_text(item)
        if code and code not in out:
            out.append(code)
    return out


def descriptor(value: Any, field_name: str = "faceDescriptor") -> Optional[list[float]]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ValidationError("Face descriptor must be a list of numbers", errors={field_name: "must be a list of numbers"})
    try:
        values = [float(x) for x in value]
    except (TypeError, ValueError):
        raise ValidationError("Face descriptor must be a list of numbers", errors={field_name: "must be a list of numbers"})
    if not all(math.isfinite(x) for x in values):
        raise ValidationError("Face descriptor values must be finite", errors={field_name: "must contain only finite numbers"})
    return values

