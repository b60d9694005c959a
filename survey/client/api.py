"""Async HTTP client for the survey REST contract.

Every call returns typed models on 2xx, raises ApiError on any other status,
InvalidResponseError when a 2xx body does not decode into the expected
models, and TransportFailure when no response arrives. No retries and no timeout
beyond httpx's defaults.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel

from survey.client.errors import ApiError, InvalidResponseError, TransportFailure
from survey.models.answers import AnswerItem, PersistedAnswer, SubmitAnswersRequest, UserAnswer
from survey.models.auth import AuthResult, VerifyResult
from survey.models.question import Question

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _problem_detail(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        return str(detail) if detail else None
    return None


def _invalid(response: httpx.Response, exc: Exception) -> InvalidResponseError:
    text = str(exc)
    reason = text.splitlines()[0] if text else type(exc).__name__
    logger.warning("api_invalid_body path=%s status=%s error=%s", response.request.url.path, response.status_code, reason)
    return InvalidResponseError(response.status_code, response.text, reason)


def _parse_one(response: httpx.Response, model: Type[M]) -> M:
    # JSONDecodeError and pydantic's ValidationError are both ValueErrors
    try:
        return model.model_validate(response.json())
    except ValueError as exc:
        raise _invalid(response, exc) from exc


def _parse_many(response: httpx.Response, model: Type[M]) -> List[M]:
    try:
        rows = response.json()
        if not isinstance(rows, list):
            raise ValueError(f"expected a JSON array, got {type(rows).__name__}")
        return [model.model_validate(row) for row in rows]
    except ValueError as exc:
        raise _invalid(response, exc) from exc


class SurveyApiClient:
    """Thin wrapper over `httpx.AsyncClient` bound to one API base URL.

    Pass `transport` (e.g. `httpx.ASGITransport` or `httpx.MockTransport`) to
    run against an in-process app or a stub.
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), transport=transport)

    async def __aenter__(self) -> "SurveyApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("api_transport_failure method=%s path=%s error=%s", method, path, exc)
            raise TransportFailure(str(exc) or type(exc).__name__) from exc
        if not response.is_success:
            logger.info("api_rejected method=%s path=%s status=%s", method, path, response.status_code)
            raise ApiError(response.status_code, response.text, _problem_detail(response))
        return response

    # Auth

    async def register(self, username: str, password: str) -> AuthResult:
        response = await self._request("POST", "/auth/register", json={"username": username, "password": password})
        return _parse_one(response, AuthResult)

    async def login(self, username: str, password: str) -> AuthResult:
        response = await self._request("POST", "/auth/login", json={"username": username, "password": password})
        return _parse_one(response, AuthResult)

    async def verify(self, token: str) -> VerifyResult:
        response = await self._request("GET", "/auth/verify", headers=_bearer(token))
        return _parse_one(response, VerifyResult)

    # Questions and answers

    async def list_questions(self, token: str | None = None) -> List[Question]:
        response = await self._request("GET", "/questions", headers=_bearer(token) if token else None)
        return _parse_many(response, Question)

    async def submit_answers(self, token: str, items: Sequence[AnswerItem]) -> List[PersistedAnswer]:
        body = SubmitAnswersRequest(answer=list(items)).model_dump()
        response = await self._request("POST", "/user-answers", json=body, headers=_bearer(token))
        return _parse_many(response, PersistedAnswer)

    async def get_user_answers(self, user_id: int, token: str) -> List[UserAnswer]:
        response = await self._request("GET", f"/user-answers/{user_id}", headers=_bearer(token))
        return _parse_many(response, UserAnswer)


__all__ = ["SurveyApiClient"]
