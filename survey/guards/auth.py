"""Bearer-token guard for authenticated routes.

A missing token yields 401; a malformed, badly signed or expired token yields
403. Handlers receive the decoded claims and never trust a client-supplied
user id.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header, Request

from survey.config import AppConfig
from survey.http.problem import problem
from survey.logic.auth import TokenClaims, TokenError, decode_access_token

logger = logging.getLogger(__name__)


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def require_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> TokenClaims:
    token = _extract_bearer(authorization)
    if token is None:
        logger.info("auth_rejected reason=missing_token path=%s", request.url.path)
        raise problem(401, "Access token required")
    try:
        return decode_access_token(token, get_config(request).auth)
    except TokenError:
        raise problem(403, "Invalid or expired token")


__all__ = ["get_config", "require_user"]
