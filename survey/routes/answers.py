"""Answer submission and retrieval endpoints.

Answers are always stored against the authenticated user; reads are limited
to the caller's own rows.
"""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from survey.guards.auth import require_user
from survey.http.problem import problem
from survey.logic.answers_intake import AnswerPayloadError, parse_answer_payload, parse_row_id
from survey.logic.auth import TokenClaims
from survey.logic.events import ANSWERS_SUBMITTED, publish
from survey.logic.repository_answers import insert_answers, list_answers_for_user
from survey.logic.repository_questions import existing_question_ids
from survey.models.answers import PersistedAnswer, UserAnswer


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/user-answers",
    summary="Persist a batch of answers for the authenticated user",
    operation_id="submitUserAnswers",
    status_code=201,
    response_model=List[PersistedAnswer],
)
def submit_user_answers(
    payload: Any = Body(default=None),
    claims: TokenClaims = Depends(require_user),
):
    try:
        pairs = parse_answer_payload(payload)
    except AnswerPayloadError as exc:
        logger.info("answers_payload_rejected user_id=%s reason=%s", claims.user_id, exc)
        raise problem(400, str(exc))

    unknown = sorted({qid for qid, _ in pairs} - existing_question_ids(qid for qid, _ in pairs))
    if unknown:
        raise problem(400, f"Unknown question_id: {unknown}", unknown_question_ids=unknown)

    rows = insert_answers(claims.user_id, pairs)
    publish(ANSWERS_SUBMITTED, {"user_id": claims.user_id, "count": len(rows)})
    return JSONResponse(rows, status_code=201)


@router.get(
    "/user-answers/{user_id}",
    summary="List the caller's answers with question metadata",
    operation_id="listUserAnswers",
    response_model=List[UserAnswer],
)
def get_user_answers(user_id: str, claims: TokenClaims = Depends(require_user)):
    requested = parse_row_id(user_id)
    if requested is None or requested != claims.user_id:
        logger.warning("answers_read_forbidden caller=%s requested=%r", claims.user_id, user_id[:32])
        raise problem(403, "You can only access your own answers")
    return list_answers_for_user(claims.user_id)


__all__ = ["router"]
