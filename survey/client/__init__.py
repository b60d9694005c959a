"""Multi-page questionnaire client.

Holds the form state machine (validation, answer and error stores, pager,
submission) and the async API client it talks to. Nothing here imports the
service side of the package.
"""

from __future__ import annotations

from survey.client.api import SurveyApiClient
from survey.client.auth_context import AuthContext, get_auth_context, login, logout, register, restore
from survey.client.errors import (
    ApiError,
    AuthFlowError,
    InvalidResponseError,
    NotAuthenticatedError,
    ReauthenticationRequired,
    SurveyClientError,
    TransportFailure,
    UnknownQuestionError,
)
from survey.client.form_session import FormSession, load_form_session
from survey.client.pager import Pager, PageTransition
from survey.client.render import FormBinding, PageView, build_page_view
from survey.client.results import ResultsKind, ResultsState, load_results, start_over
from survey.client.submission import SubmissionController, SubmissionOutcome, SubmissionStatus
from survey.client.validation import validate_field

__all__ = [
    "SurveyApiClient",
    "AuthContext",
    "get_auth_context",
    "login",
    "logout",
    "register",
    "restore",
    "ApiError",
    "AuthFlowError",
    "InvalidResponseError",
    "NotAuthenticatedError",
    "ReauthenticationRequired",
    "SurveyClientError",
    "TransportFailure",
    "UnknownQuestionError",
    "FormSession",
    "load_form_session",
    "Pager",
    "PageTransition",
    "FormBinding",
    "PageView",
    "build_page_view",
    "ResultsKind",
    "ResultsState",
    "load_results",
    "start_over",
    "SubmissionController",
    "SubmissionOutcome",
    "SubmissionStatus",
    "validate_field",
]
