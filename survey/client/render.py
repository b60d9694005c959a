"""Presentation-neutral page view and the event bindings behind it.

`build_page_view` turns the current state of a FormSession into a pydantic
model any front end can draw. `FormBinding` is the adapter such a front end
calls for user events; it only forwards to the session and the submission
controller, so the view can be rebuilt after every event.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from survey.client.form_session import FormSession
from survey.client.pager import PageTransition
from survey.client.submission import SubmissionController, SubmissionOutcome
from survey.models.input_kind import InputKind
from survey.models.question import Question

SUBMIT_LABEL = "Submit All Answers"
SUBMITTING_LABEL = "Submitting..."


class InputControl(BaseModel):
    element: str
    input_type: Optional[str] = None
    placeholder: str
    rows: Optional[int] = None
    min: Optional[int] = None


class QuestionView(BaseModel):
    id: int
    element_id: str
    title: str
    description: Optional[str] = None
    required: bool
    value: str
    error: str
    control: InputControl


class Progress(BaseModel):
    page: int
    total: int
    label: str
    percent: int


class PageView(BaseModel):
    legend: str
    questions: List[QuestionView]
    progress: Progress
    previous_enabled: bool
    primary_action: str
    submit_label: str
    submit_disabled: bool
    notice: str = ""


def control_for(kind: str) -> InputControl:
    if kind == InputKind.TEXTAREA:
        return InputControl(element="textarea", placeholder="Enter your answer...", rows=3)
    if kind == InputKind.NUMBER:
        return InputControl(element="input", input_type="number", placeholder="Enter a number...", min=0)
    if kind == InputKind.EMAIL:
        return InputControl(element="input", input_type="email", placeholder="Enter your email address...")
    if kind == InputKind.TEL:
        return InputControl(element="input", input_type="tel", placeholder="Enter your phone number...")
    return InputControl(element="input", input_type="text", placeholder="Enter your answer...")


def element_id(question: Question) -> str:
    return f"question-{question.id}"


def _question_view(session: FormSession, question: Question) -> QuestionView:
    return QuestionView(
        id=question.id,
        element_id=element_id(question),
        title=question.title,
        description=question.description,
        required=session.is_mandatory(question),
        value=session.answers.get(question.id),
        error=session.errors.message(question.id),
        control=control_for(question.input_type),
    )


def build_page_view(session: FormSession) -> PageView:
    pager = session.pager
    total = pager.total_pages
    page = pager.index + 1 if total else 0
    percent = round(page / total * 100) if total else 0
    return PageView(
        legend=pager.current_key,
        questions=[_question_view(session, q) for q in pager.current_page()],
        progress=Progress(page=page, total=total, label=f"Page {page} of {total}", percent=percent),
        previous_enabled=not pager.is_first_page,
        primary_action=pager.primary_action,
        submit_label=SUBMITTING_LABEL if session.submitting else SUBMIT_LABEL,
        submit_disabled=session.submitting,
        notice=session.notice,
    )


class FormBinding:
    def __init__(self, session: FormSession, controller: SubmissionController) -> None:
        self.session = session
        self.controller = controller

    def on_change(self, question_id: int, value: str) -> None:
        self.session.change(question_id, value)

    def on_blur(self, question_id: int, value: str | None = None) -> str:
        return self.session.blur(question_id, value)

    def on_next(self) -> PageTransition:
        return self.session.next_page()

    def on_previous(self) -> PageTransition:
        return self.session.previous_page()

    async def on_submit(self) -> SubmissionOutcome:
        return await self.controller.submit(self.session)

    def view(self) -> PageView:
        return build_page_view(self.session)


__all__ = [
    "InputControl",
    "QuestionView",
    "Progress",
    "PageView",
    "SUBMIT_LABEL",
    "SUBMITTING_LABEL",
    "control_for",
    "element_id",
    "build_page_view",
    "FormBinding",
]
