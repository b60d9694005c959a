"""Submission of a completed questionnaire.

`SubmissionController.submit` runs, in order: the re-entry guard, the
authentication precondition, whole-form validation across every page, an
explicit mandatory-completeness pass, payload construction, and exactly one
POST /user-answers. The session's `submitting` flag is set only around the
network call and cleared on every exit path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from survey.client.api import SurveyApiClient
from survey.client.auth_context import AuthContext, get_auth_context
from survey.client.errors import ApiError, InvalidResponseError, TransportFailure
from survey.client.form_session import FormSession
from survey.models.answers import PersistedAnswer

logger = logging.getLogger(__name__)


class SubmissionStatus:
    SUBMITTED = "submitted"
    REJECTED = "rejected"
    NETWORK_ERROR = "network-error"
    INVALID = "invalid"
    INCOMPLETE = "incomplete"
    BUSY = "busy"


FIX_ERRORS_MESSAGE = "Please fix the validation errors before submitting."


@dataclass
class SubmissionOutcome:
    status: str
    message: str = ""
    user_id: Optional[int] = None
    http_status: Optional[int] = None
    body: str = ""
    persisted: List[PersistedAnswer] = field(default_factory=list)
    # True when the server refused the token and the user must log in again
    reauthenticate: bool = False

    @property
    def ok(self) -> bool:
        return self.status == SubmissionStatus.SUBMITTED


class SubmissionController:
    def __init__(self, api: SurveyApiClient, auth: AuthContext | None = None) -> None:
        self.api = api
        self.auth = auth or get_auth_context()

    def _blocked(self, session: FormSession, status: str, message: str) -> SubmissionOutcome:
        session.notice = message
        logger.info("submission_blocked status=%s", status)
        return SubmissionOutcome(status=status, message=message)

    async def submit(self, session: FormSession) -> SubmissionOutcome:
        """Validate and persist the session's answers.

        Raises NotAuthenticatedError when the auth context is empty.
        """
        if session.submitting:
            logger.info("submission_ignored reason=busy")
            return SubmissionOutcome(status=SubmissionStatus.BUSY, message="A submission is already in progress.")

        user, token = self.auth.require()

        # Whole form, not only the current page: earlier pages may hold stale answers
        failures = session.validation_failures()
        if failures:
            session.errors.replace(failures)
            return self._blocked(session, SubmissionStatus.INVALID, FIX_ERRORS_MESSAGE)

        # Second, separate completeness pass over the mandatory group
        if session.missing_mandatory():
            return self._blocked(
                session,
                SubmissionStatus.INCOMPLETE,
                f"Please complete all {session.mandatory_group} fields before submitting.",
            )

        items = session.answer_items()
        session.submitting = True
        session.notice = ""
        try:
            persisted = await self.api.submit_answers(token, items)
        except ApiError as exc:
            message = f"Failed to submit answers: {exc.status} - {exc.body}"
            session.notice = message
            return SubmissionOutcome(
                status=SubmissionStatus.REJECTED,
                message=message,
                user_id=user.id,
                http_status=exc.status,
                body=exc.body,
                reauthenticate=exc.is_auth_failure,
            )
        except InvalidResponseError as exc:
            # The server answered 2xx but the body cannot be read back
            message = f"Failed to submit answers: {exc}"
            session.notice = message
            return SubmissionOutcome(
                status=SubmissionStatus.REJECTED,
                message=message,
                user_id=user.id,
                http_status=exc.status,
                body=exc.body,
            )
        except TransportFailure as exc:
            message = f"Failed to submit answers: {exc}"
            session.notice = message
            return SubmissionOutcome(status=SubmissionStatus.NETWORK_ERROR, message=message, user_id=user.id)
        finally:
            session.submitting = False

        logger.info("submission_succeeded user_id=%s answers=%s", user.id, len(items))
        return SubmissionOutcome(status=SubmissionStatus.SUBMITTED, user_id=user.id, persisted=persisted)


__all__ = [
    "SubmissionController",
    "SubmissionOutcome",
    "SubmissionStatus",
    "FIX_ERRORS_MESSAGE",
]
