"""Exception hierarchy for the questionnaire client."""

from __future__ import annotations

from typing import Optional


class SurveyClientError(Exception):
    """Base class for every error raised by `survey.client`."""


class NotAuthenticatedError(SurveyClientError):
    """An action needs a logged-in user but the auth context is empty."""

    def __init__(self, message: str = "User not authenticated. Please log in again.") -> None:
        super().__init__(message)


class ReauthenticationRequired(SurveyClientError):
    """The server refused the bearer token (401/403); the user must log in again."""


class UnknownQuestionError(SurveyClientError, KeyError):
    """A store was addressed with an id that is not a loaded question."""

    def __init__(self, question_id: object) -> None:
        super().__init__(question_id)
        self.question_id = question_id

    def __str__(self) -> str:
        return f"unknown question id: {self.question_id!r}"


class ApiError(SurveyClientError):
    """The API answered with a non-2xx status."""

    def __init__(self, status: int, body: str, detail: Optional[str] = None) -> None:
        super().__init__(f"{status} - {body}")
        self.status = status
        self.body = body
        self.detail = detail

    @property
    def is_auth_failure(self) -> bool:
        return self.status in (401, 403)


class InvalidResponseError(SurveyClientError):
    """A 2xx response whose body is not the expected JSON shape."""

    def __init__(self, status: int, body: str, reason: str) -> None:
        super().__init__(f"unexpected response body ({status}): {reason}")
        self.status = status
        self.body = body


class TransportFailure(SurveyClientError):
    """The request never produced a response (connection, DNS, timeout...)."""


class AuthFlowError(SurveyClientError):
    """Login or registration failed; the message is shown to the user."""


__all__ = [
    "SurveyClientError",
    "NotAuthenticatedError",
    "ReauthenticationRequired",
    "UnknownQuestionError",
    "ApiError",
    "InvalidResponseError",
    "TransportFailure",
    "AuthFlowError",
]
