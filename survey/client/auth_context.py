"""Process-wide authentication context and the login/register flows.

The context is initialised explicitly on login or register success and torn
down explicitly on logout or when the server refuses the token. Nothing else
mutates it.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from survey.client.api import SurveyApiClient
from survey.client.errors import (
    ApiError,
    AuthFlowError,
    InvalidResponseError,
    NotAuthenticatedError,
    ReauthenticationRequired,
    TransportFailure,
)
from survey.models.auth import AuthResult, AuthUser

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please fill in all fields"


class AuthContext:
    def __init__(self) -> None:
        self.user: Optional[AuthUser] = None
        self.token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.token)

    def init(self, user: AuthUser, token: str) -> None:
        if not token:
            raise ValueError("token must be non-empty")
        self.user = user
        self.token = token
        logger.info("auth_context_init user_id=%s", user.id)

    def teardown(self) -> None:
        if self.user is not None:
            logger.info("auth_context_teardown user_id=%s", self.user.id)
        self.user = None
        self.token = None

    def require(self) -> Tuple[AuthUser, str]:
        """Return (user, token) or raise NotAuthenticatedError."""
        if self.user is None or not self.token:
            raise NotAuthenticatedError()
        return self.user, self.token


_CONTEXT = AuthContext()


def get_auth_context() -> AuthContext:
    return _CONTEXT


async def _authenticate(
    api: SurveyApiClient,
    username: str,
    password: str,
    *,
    registering: bool,
    context: AuthContext,
) -> AuthUser:
    name = (username or "").strip()
    if not name or not (password or "").strip():
        raise AuthFlowError(MISSING_FIELDS_MESSAGE)
    try:
        if registering:
            result: AuthResult = await api.register(name, password)
        else:
            result = await api.login(name, password)
    except ApiError as exc:
        fallback = "Registration failed" if registering else "Login failed"
        raise AuthFlowError(exc.detail or fallback) from exc
    except (InvalidResponseError, TransportFailure) as exc:
        raise AuthFlowError(str(exc)) from exc
    context.init(result.user, result.token)
    return result.user


async def login(api: SurveyApiClient, username: str, password: str, context: AuthContext | None = None) -> AuthUser:
    return await _authenticate(api, username, password, registering=False, context=context or _CONTEXT)


async def register(api: SurveyApiClient, username: str, password: str, context: AuthContext | None = None) -> AuthUser:
    return await _authenticate(api, username, password, registering=True, context=context or _CONTEXT)


async def restore(api: SurveyApiClient, token: str, context: AuthContext | None = None) -> AuthUser:
    """Re-establish a session from a previously issued token.

    A refused token tears the context down and raises
    ReauthenticationRequired; transport failures and unreadable bodies
    propagate unchanged.
    """
    ctx = context or _CONTEXT
    try:
        result = await api.verify(token)
    except ApiError as exc:
        if exc.is_auth_failure:
            ctx.teardown()
            raise ReauthenticationRequired(exc.detail or "Session expired. Please log in again.") from exc
        raise
    ctx.init(result.user, token)
    return result.user


def logout(context: AuthContext | None = None) -> None:
    (context or _CONTEXT).teardown()


__all__ = [
    "AuthContext",
    "MISSING_FIELDS_MESSAGE",
    "get_auth_context",
    "login",
    "register",
    "restore",
    "logout",
]
