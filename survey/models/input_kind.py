"""InputKind constants for the question `input_type` wire values.

A plain constants container instead of an Enum: values travel as raw strings
in JSON and SQL, and unknown values must still load (they validate as
free text).
"""

from __future__ import annotations


class InputKind:
    TEXT = "text"  # short text
    TEXTAREA = "textarea"  # paragraph
    NUMBER = "number"
    EMAIL = "email"
    TEL = "tel"  # phone

    ALL = (TEXT, TEXTAREA, NUMBER, EMAIL, TEL)


__all__ = ["InputKind"]
