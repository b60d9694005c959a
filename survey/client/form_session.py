"""Form session: the single structure holding one questionnaire run.

A FormSession owns the loaded questions, the answer and error stores, the
pager and the `submitting` flag. Its state only changes through the methods
below (change/blur bindings, page transitions) and through
`SubmissionController`, so it can be exercised without any rendering layer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Sequence

from survey.client.errors import UnknownQuestionError
from survey.client.pager import PageTransition, Pager
from survey.client.stores import AnswerStore, ErrorStore
from survey.client.validation import validate_field
from survey.config import DEFAULT_MANDATORY_GROUP
from survey.models.answers import AnswerItem
from survey.models.question import Question

if TYPE_CHECKING:
    from survey.client.api import SurveyApiClient

logger = logging.getLogger(__name__)


class FormSession:
    def __init__(self, questions: Sequence[Question], mandatory_group: str = DEFAULT_MANDATORY_GROUP) -> None:
        self.questions: tuple[Question, ...] = tuple(questions)
        self._by_id: Dict[int, Question] = {}
        for q in self.questions:
            if q.id in self._by_id:
                raise ValueError(f"duplicate question id: {q.id}")
            self._by_id[q.id] = q
        self.mandatory_group = mandatory_group
        self.answers = AnswerStore(self._by_id)
        self.errors = ErrorStore(self._by_id)
        self.pager = Pager(self.questions, self.answers, self.errors, mandatory_group)
        self.submitting = False
        # Last blocking notice shown to the user ("" when none)
        self.notice = ""

    def question(self, question_id: int) -> Question:
        try:
            return self._by_id[question_id]
        except KeyError:
            raise UnknownQuestionError(question_id) from None

    def is_mandatory(self, question: Question) -> bool:
        return question.field == self.mandatory_group

    # Bindings

    def change(self, question_id: int, value: str) -> None:
        """Record an edit; a pending error on the field is reset until blur."""
        self.answers.set(question_id, value)
        if self.errors.has_error(question_id):
            self.errors.clear(question_id)

    def blur(self, question_id: int, value: str | None = None) -> str:
        """Validate a field on focus loss and store the resulting message.

        A `value` carried by the blur event is recorded first so the stored
        answer and its error always describe the same text.
        """
        question = self.question(question_id)
        if value is not None:
            self.answers.set(question_id, value)
        message = validate_field(question.input_type, self.answers.get(question_id), self.is_mandatory(question))
        self.errors.set(question_id, message)
        return message

    # Navigation

    def next_page(self) -> PageTransition:
        transition = self.pager.advance()
        self.notice = transition.message
        if not transition.accepted:
            logger.info("page_advance_blocked page=%s", self.pager.current_key)
        return transition

    def previous_page(self) -> PageTransition:
        self.notice = ""
        return self.pager.retreat()

    # Whole-form checks used by submission

    def validation_failures(self) -> Dict[int, str]:
        """Validate every question against its current answer (default "")."""
        failures: Dict[int, str] = {}
        for question in self.questions:
            message = validate_field(
                question.input_type,
                self.answers.get(question.id),
                self.is_mandatory(question),
            )
            if message:
                failures[question.id] = message
        return failures

    def missing_mandatory(self) -> List[Question]:
        return [
            q for q in self.questions
            if self.is_mandatory(q) and not self.answers.is_answered(q.id)
        ]

    def answer_items(self) -> List[AnswerItem]:
        """One item per loaded question, in load order; unanswered -> ""."""
        return [AnswerItem(question_id=q.id, answer=self.answers.get(q.id)) for q in self.questions]


async def load_form_session(api: "SurveyApiClient", mandatory_group: str = DEFAULT_MANDATORY_GROUP) -> FormSession:
    """Fetch the question catalogue once and open a fresh session over it."""
    questions = await api.list_questions()
    logger.info("form_session_loaded questions=%s", len(questions))
    return FormSession(questions, mandatory_group)


__all__ = ["FormSession", "load_form_session"]
