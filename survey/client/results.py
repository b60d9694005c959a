"""Results retrieval for the thank-you view.

`load_results` always returns one of four terminal states; 403 is reported as
`not_authorized` and never conflated with an empty result list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from survey.client.api import SurveyApiClient
from survey.client.errors import ApiError, InvalidResponseError, TransportFailure
from survey.client.grouping import group_by_field
from survey.models.answers import UserAnswer

logger = logging.getLogger(__name__)

ENTRY_POINT = "/"
NO_ANSWER_TEXT = "No answer provided"


class ResultsKind:
    RESULTS = "results"
    NO_RESULTS = "no_results"
    FETCH_ERROR = "fetch_error"
    NOT_AUTHORIZED = "not_authorized"


@dataclass
class ResultsState:
    kind: str
    groups: Dict[str, List[UserAnswer]] = field(default_factory=dict)
    message: str = ""
    submitted_at: Optional[str] = None
    actions: Tuple[str, ...] = ("start_over",)

    @property
    def answer_count(self) -> int:
        return sum(len(items) for items in self.groups.values())


def display_answer(answer: UserAnswer) -> str:
    return answer.answer or NO_ANSWER_TEXT


def start_over() -> str:
    """Return the route of the questionnaire entry point."""
    return ENTRY_POINT


async def load_results(api: SurveyApiClient, user_id: int, token: str) -> ResultsState:
    try:
        answers = await api.get_user_answers(user_id, token)
    except ApiError as exc:
        if exc.is_auth_failure:
            logger.warning("results_not_authorized user_id=%s status=%s", user_id, exc.status)
            return ResultsState(
                kind=ResultsKind.NOT_AUTHORIZED,
                message=exc.detail or "You are not authorized to view these results. Please log in again.",
            )
        return ResultsState(
            kind=ResultsKind.FETCH_ERROR,
            message=f"Error fetching results: Failed to fetch results: {exc.status}",
        )
    except (InvalidResponseError, TransportFailure) as exc:
        return ResultsState(kind=ResultsKind.FETCH_ERROR, message=f"Error fetching results: {exc}")

    if not answers:
        return ResultsState(kind=ResultsKind.NO_RESULTS, message="No responses found for this user.")
    return ResultsState(
        kind=ResultsKind.RESULTS,
        groups=group_by_field(answers),
        submitted_at=answers[0].created_at,
    )


__all__ = [
    "ResultsKind",
    "ResultsState",
    "ENTRY_POINT",
    "NO_ANSWER_TEXT",
    "display_answer",
    "start_over",
    "load_results",
]
