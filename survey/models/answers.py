"""Pydantic models for answer submission and retrieval payloads."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class AnswerItem(BaseModel):
    question_id: int
    answer: str


class SubmitAnswersRequest(BaseModel):
    """Body of POST /user-answers. The owner comes from the bearer token."""

    answer: List[AnswerItem]


class PersistedAnswer(BaseModel):
    id: int
    user_id: int
    question_id: int
    answer: Optional[str] = None
    created_at: Optional[str] = None


class UserAnswer(PersistedAnswer):
    """Persisted answer joined with its question metadata."""

    title: str
    description: Optional[str] = None
    input_type: str
    field: str


__all__ = ["AnswerItem", "SubmitAnswersRequest", "PersistedAnswer", "UserAnswer"]
