"""In-memory answer and error stores keyed by question id.

Both stores refuse ids that do not belong to the loaded questions. In the
answer store a missing key means "not yet answered" while "" means "touched
but cleared"; in the error store "" is the "no error" sentinel.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator

from survey.client.errors import UnknownQuestionError


class _QuestionKeyedStore:
    def __init__(self, question_ids: Iterable[int]) -> None:
        self._allowed = frozenset(question_ids)
        self._values: Dict[int, str] = {}

    def _check(self, question_id: int) -> None:
        if question_id not in self._allowed:
            raise UnknownQuestionError(question_id)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def as_dict(self) -> Dict[int, str]:
        return dict(self._values)


class AnswerStore(_QuestionKeyedStore):
    def set(self, question_id: int, value: str) -> None:
        self._check(question_id)
        self._values[question_id] = "" if value is None else str(value)

    def get(self, question_id: int, default: str = "") -> str:
        self._check(question_id)
        return self._values.get(question_id, default)

    def is_answered(self, question_id: int) -> bool:
        """True when the value is non-empty after trimming."""
        return bool(self.get(question_id).strip())


class ErrorStore(_QuestionKeyedStore):
    def set(self, question_id: int, message: str) -> None:
        self._check(question_id)
        self._values[question_id] = message or ""

    def clear(self, question_id: int) -> None:
        self.set(question_id, "")

    def message(self, question_id: int) -> str:
        self._check(question_id)
        return self._values.get(question_id, "")

    def has_error(self, question_id: int) -> bool:
        return bool(self.message(question_id))

    def failing(self) -> Dict[int, str]:
        return {qid: msg for qid, msg in self._values.items() if msg}

    def replace(self, messages: Dict[int, str]) -> None:
        """Swap the whole map for `messages` (all keys are checked first)."""
        for qid in messages:
            self._check(qid)
        self._values = {qid: msg or "" for qid, msg in messages.items()}


__all__ = ["AnswerStore", "ErrorStore"]
