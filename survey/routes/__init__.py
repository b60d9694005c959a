"""APIRouter registration for the survey service."""

from __future__ import annotations

from fastapi import APIRouter

from survey.routes.answers import router as answers_router
from survey.routes.auth import router as auth_router
from survey.routes.questions import router as questions_router

api_router = APIRouter()
api_router.include_router(auth_router, tags=["Auth"])
api_router.include_router(questions_router, tags=["Questions"])
api_router.include_router(answers_router, tags=["Answers"])

__all__ = ["api_router"]
