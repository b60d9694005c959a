"""Normalisation of POST /user-answers payloads.

The body must be an object carrying an `answer` array. Items without a
`question_id` or without an `answer` key are skipped; the remaining items are
returned as (question_id, answer) pairs in request order.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple


# Row ids are stored as signed 64-bit integers
MAX_ROW_ID = 2**63 - 1


class AnswerPayloadError(ValueError):
    pass


def parse_row_id(text: str) -> Optional[int]:
    """Parse an ASCII decimal id within 1..MAX_ROW_ID, or return None."""
    text = text.strip()
    if not (text.isascii() and text.isdecimal()) or len(text) > len(str(MAX_ROW_ID)):
        return None
    value = int(text)
    return value if 1 <= value <= MAX_ROW_ID else None


def _coerce_question_id(raw: Any) -> int:
    value: Optional[int] = None
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw if 1 <= raw <= MAX_ROW_ID else None
    elif isinstance(raw, str):
        value = parse_row_id(raw)
    if value is None:
        raise AnswerPayloadError(f"Invalid question_id: {raw!r}")
    return value


def _coerce_answer(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    if isinstance(raw, (dict, list)):
        raise AnswerPayloadError("Answers must be scalar values")
    return raw if isinstance(raw, str) else str(raw)


def parse_answer_payload(payload: Any) -> List[Tuple[int, Optional[str]]]:
    items = payload.get("answer") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise AnswerPayloadError("Invalid request format. Expected answer array.")

    pairs: List[Tuple[int, Optional[str]]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        if not item.get("question_id") or "answer" not in item:
            continue
        pairs.append((_coerce_question_id(item["question_id"]), _coerce_answer(item["answer"])))
    return pairs


__all__ = ["AnswerPayloadError", "MAX_ROW_ID", "parse_row_id", "parse_answer_payload"]
