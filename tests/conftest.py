"""Shared pytest configuration.

Async tests run on anyio's pytest plugin with the asyncio backend only.
"""

from __future__ import annotations

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def sample_questions():
    """Three pages: a mandatory one, then two optional ones."""
    from survey.models.question import Question

    return [
        Question(id=1, title="Name", input_type="text", field="Personal Information"),
        Question(id=2, title="Email Address", input_type="email", field="Personal Information"),
        Question(id=3, title="Age", input_type="number", field="Demographic Information"),
        Question(id=4, title="Phone Number", input_type="tel", field="Demographic Information"),
        Question(id=5, title="Medications", description="Current prescriptions.", input_type="textarea", field="Health Information"),
    ]


@pytest.fixture
def session(sample_questions):
    from survey.client.form_session import FormSession

    return FormSession(sample_questions)


@pytest.fixture
def auth_context():
    from survey.client.auth_context import AuthContext
    from survey.models.auth import AuthUser

    ctx = AuthContext()
    ctx.init(AuthUser(id=7, username="ada"), "token-7")
    return ctx
