"""Pydantic model for questions served by GET /questions."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Question(BaseModel):
    """A single questionnaire item; immutable once loaded.

    `input_type` is one of the `InputKind` values for every seeded question.
    Other values still load and are treated as free text.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: Optional[str] = None
    input_type: str
    field: str
    created_at: Optional[str] = None


__all__ = ["Question"]
