"""Problem+JSON utilities and global exception handlers.

Every non-2xx response produced by the service carries an RFC7807 body
`{title, status, detail}` with media type application/problem+json.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Dict

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def _title_for(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def problem(status: int, detail: str, **extra: Any) -> HTTPException:
    """Build an HTTPException whose detail is a ready problem document."""
    body: Dict[str, Any] = {"title": _title_for(status), "status": status, "detail": detail}
    body.update(extra)
    return HTTPException(status_code=status, detail=body)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(exc.status_code or 500)
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"title": _title_for(status), "status": status, "detail": str(exc.detail or "")}
    headers = dict(exc.headers) if isinstance(exc.headers, dict) else None
    return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        logger.info("malformed_json path=%s", request.url.path)
        return JSONResponse(
            {"title": "Bad Request", "status": 400, "detail": "Malformed JSON body"},
            status_code=400,
            media_type=PROBLEM_MEDIA_TYPE,
        )
    problem_body = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "errors": [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ],
    }
    return JSONResponse(problem_body, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(
        {"title": "Internal Server Error", "status": 500, "detail": "Internal Server Error"},
        status_code=500,
        media_type=PROBLEM_MEDIA_TYPE,
    )


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
