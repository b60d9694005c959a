"""Page navigation over questions grouped by their `field` category.

Pages are ordered by the first appearance of their group key in the loaded
question list. Moving forward re-validates the current page against the
answer store and writes the outcome into the error store; moving backward
never validates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from survey.client.grouping import group_by_field
from survey.client.stores import AnswerStore, ErrorStore
from survey.client.validation import validate_field
from survey.config import DEFAULT_MANDATORY_GROUP
from survey.models.question import Question

ACTION_NEXT = "next"
ACTION_SUBMIT = "submit"


@dataclass(frozen=True)
class PageTransition:
    accepted: bool
    index: int
    message: str = ""


class Pager:
    def __init__(
        self,
        questions: Sequence[Question],
        answers: AnswerStore,
        errors: ErrorStore,
        mandatory_group: str = DEFAULT_MANDATORY_GROUP,
    ) -> None:
        self._groups = group_by_field(questions)
        self._keys: Tuple[str, ...] = tuple(self._groups)
        self._answers = answers
        self._errors = errors
        self.mandatory_group = mandatory_group
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def page_keys(self) -> Tuple[str, ...]:
        return self._keys

    @property
    def total_pages(self) -> int:
        return len(self._keys)

    @property
    def current_key(self) -> str:
        return self._keys[self._index] if self._keys else ""

    @property
    def is_first_page(self) -> bool:
        return self._index == 0

    @property
    def is_last_page(self) -> bool:
        return self._index >= self.total_pages - 1

    @property
    def primary_action(self) -> str:
        return ACTION_SUBMIT if self.is_last_page else ACTION_NEXT

    def is_mandatory(self, question: Question) -> bool:
        return question.field == self.mandatory_group

    def current_page(self) -> List[Question]:
        return list(self._groups.get(self.current_key, ()))

    def derived_error(self, question: Question) -> str:
        return validate_field(
            question.input_type,
            self._answers.get(question.id),
            self.is_mandatory(question),
        )

    def validate_current_page(self) -> bool:
        """Re-validate every question on the current page.

        Failing messages are stored; passing questions have their error
        cleared. Returns True when the page has no failures.
        """
        ok = True
        for question in self.current_page():
            message = self.derived_error(question)
            self._errors.set(question.id, message)
            if message:
                ok = False
        return ok

    def blocked_message(self) -> str:
        if self.current_key == self.mandatory_group:
            return f"Please complete all {self.mandatory_group} fields before proceeding."
        return "Please fix any validation errors before proceeding. Optional fields can be left empty."

    def advance(self) -> PageTransition:
        if self.is_last_page:
            return PageTransition(False, self._index, "Already on the last page; submit the form instead.")
        if not self.validate_current_page():
            return PageTransition(False, self._index, self.blocked_message())
        self._index += 1
        return PageTransition(True, self._index)

    def retreat(self) -> PageTransition:
        if self.is_first_page:
            return PageTransition(False, self._index)
        self._index -= 1
        return PageTransition(True, self._index)


__all__ = ["Pager", "PageTransition", "ACTION_NEXT", "ACTION_SUBMIT"]
