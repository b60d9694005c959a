"""End-to-end flow: the questionnaire client driving the in-process service.

The client talks to the FastAPI app through `httpx.ASGITransport`, so every
layer from the form session down to the SQLite database is exercised.
"""

from __future__ import annotations

import uuid

import httpx
import pytest

from survey.client.api import SurveyApiClient
from survey.client.auth_context import AuthContext, register
from survey.client.form_session import load_form_session
from survey.client.results import NO_ANSWER_TEXT, ResultsKind, display_answer, load_results
from survey.client.submission import SubmissionController, SubmissionStatus

pytestmark = pytest.mark.anyio

_SAMPLE_VALUES = {
    "text": "Ada Lovelace",
    "number": "36",
    "email": "ada@example.com",
    "tel": "(555) 123-4567",
    "textarea": "Nothing to report.",
}


async def test_register_answer_submit_and_review(app):
    ctx = AuthContext()
    transport = httpx.ASGITransport(app=app)
    async with SurveyApiClient("http://survey.test", transport=transport) as api:
        user = await register(api, f"e2e_{uuid.uuid4().hex[:8]}", "secret123", context=ctx)

        session = await load_form_session(api)
        assert session.pager.current_key == "Personal Information"
        assert session.next_page().accepted is False

        for question in session.pager.current_page():
            session.change(question.id, _SAMPLE_VALUES[question.input_type])
            assert session.blur(question.id) == ""
        mandatory_ids = [q.id for q in session.pager.current_page()]

        while not session.pager.is_last_page:
            assert session.next_page().accepted

        outcome = await SubmissionController(api, ctx).submit(session)
        assert outcome.status == SubmissionStatus.SUBMITTED
        assert outcome.user_id == user.id
        assert len(outcome.persisted) == len(session.questions)

        state = await load_results(api, outcome.user_id, ctx.token)
        assert state.kind == ResultsKind.RESULTS
        assert list(state.groups) == list(session.pager.page_keys)
        answered = {a.question_id: display_answer(a) for group in state.groups.values() for a in group}
        for qid in mandatory_ids:
            assert answered[qid] != NO_ANSWER_TEXT
        assert sum(1 for text in answered.values() if text == NO_ANSWER_TEXT) == len(session.questions) - len(mandatory_ids)


async def test_foreign_results_are_not_authorized(app):
    transport = httpx.ASGITransport(app=app)
    first, second = AuthContext(), AuthContext()
    async with SurveyApiClient("http://survey.test", transport=transport) as api:
        owner = await register(api, f"own_{uuid.uuid4().hex[:8]}", "secret123", context=first)
        await register(api, f"oth_{uuid.uuid4().hex[:8]}", "secret123", context=second)

        state = await load_results(api, owner.id, second.token)
    assert state.kind == ResultsKind.NOT_AUTHORIZED
    assert state.groups == {}
