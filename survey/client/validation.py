"""Field-level validation for questionnaire answers.

`validate_field` is pure: the same (kind, value, mandatory) always yields the
same message, and "" means the value is acceptable.
"""

from __future__ import annotations

import re
from typing import Optional

from survey.models.input_kind import InputKind

REQUIRED_MESSAGE = "This field is required"
INVALID_EMAIL_MESSAGE = "Invalid email format"
INVALID_PHONE_MESSAGE = "Invalid phone number format (10 digits required)"
INVALID_NUMBER_MESSAGE = "Invalid number format"

PHONE_DIGITS = 10

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_NUMBER_RE = re.compile(r"[0-9]+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")


def _format_error(kind: str, value: str) -> str:
    if kind == InputKind.EMAIL:
        return "" if _EMAIL_RE.fullmatch(value) else INVALID_EMAIL_MESSAGE
    if kind == InputKind.TEL:
        digits = _NON_DIGIT_RE.sub("", value)
        return "" if len(digits) == PHONE_DIGITS else INVALID_PHONE_MESSAGE
    if kind == InputKind.NUMBER:
        return "" if _NUMBER_RE.fullmatch(value) else INVALID_NUMBER_MESSAGE
    # text, textarea and unknown kinds carry no format rule
    return ""


def validate_field(kind: str, value: Optional[str], mandatory: bool) -> str:
    """Return the error message for a field value, or "" when valid.

    Empty (after trimming) is an error only for mandatory fields; non-empty
    values are checked against the kind's format on the trimmed text.
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return REQUIRED_MESSAGE if mandatory else ""
    return _format_error(kind, trimmed)


__all__ = [
    "REQUIRED_MESSAGE",
    "INVALID_EMAIL_MESSAGE",
    "INVALID_PHONE_MESSAGE",
    "INVALID_NUMBER_MESSAGE",
    "validate_field",
]
