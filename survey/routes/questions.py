"""Question catalogue endpoint."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from survey.logic.repository_questions import list_questions
from survey.models.question import Question


router = APIRouter()


@router.get(
    "/questions",
    summary="List every question ordered by id",
    operation_id="listQuestions",
    response_model=List[Question],
)
def get_questions():
    return list_questions()


__all__ = ["router"]
