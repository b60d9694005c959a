"""Functional tests for the client auth context and login/register flows."""

from __future__ import annotations

import json

import httpx
import pytest

from survey.client.api import SurveyApiClient
from survey.client.auth_context import (
    MISSING_FIELDS_MESSAGE,
    AuthContext,
    get_auth_context,
    login,
    logout,
    register,
    restore,
)
from survey.client.errors import (
    AuthFlowError,
    InvalidResponseError,
    NotAuthenticatedError,
    ReauthenticationRequired,
    TransportFailure,
)
from survey.models.auth import AuthUser

pytestmark = pytest.mark.anyio


def _auth_body(message: str = "Login successful") -> dict:
    return {"message": message, "token": "issued-token", "user": {"id": 3, "username": "grace"}}


def _api(handler) -> SurveyApiClient:
    return SurveyApiClient("http://survey.test", transport=httpx.MockTransport(handler))


async def test_context_lifecycle():
    ctx = AuthContext()
    assert not ctx.is_authenticated
    with pytest.raises(NotAuthenticatedError) as excinfo:
        ctx.require()
    assert str(excinfo.value) == "User not authenticated. Please log in again."

    ctx.init(AuthUser(id=1, username="ada"), "tok")
    assert ctx.require() == (AuthUser(id=1, username="ada"), "tok")
    with pytest.raises(ValueError):
        ctx.init(AuthUser(id=1, username="ada"), "")

    ctx.teardown()
    assert ctx.user is None and ctx.token is None


async def test_login_trims_username_and_initialises_context():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json=_auth_body())

    ctx = AuthContext()
    async with _api(handler) as api:
        user = await login(api, "  grace  ", "hopper1", context=ctx)

    assert seen == [("/auth/login", {"username": "grace", "password": "hopper1"})]
    assert user.id == 3
    assert ctx.token == "issued-token"


async def test_blank_fields_fail_without_network_call():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_auth_body())

    ctx = AuthContext()
    async with _api(handler) as api:
        with pytest.raises(AuthFlowError, match=MISSING_FIELDS_MESSAGE):
            await login(api, "   ", "secret", context=ctx)
        with pytest.raises(AuthFlowError, match=MISSING_FIELDS_MESSAGE):
            await register(api, "grace", "   ", context=ctx)
    assert seen == []
    assert not ctx.is_authenticated


async def test_server_message_surfaces_on_failed_register():
    body = {"title": "Bad Request", "status": 400, "detail": "Username already exists"}
    ctx = AuthContext()
    async with _api(lambda req: httpx.Response(400, json=body)) as api:
        with pytest.raises(AuthFlowError, match="Username already exists"):
            await register(api, "grace", "hopper1", context=ctx)
    assert not ctx.is_authenticated


async def test_unreadable_login_body_fails_the_flow_without_a_session():
    ctx = AuthContext()
    async with _api(lambda req: httpx.Response(200, text="Welcome!")) as api:
        with pytest.raises(AuthFlowError, match=r"unexpected response body \(200\)") as excinfo:
            await login(api, "grace", "hopper1", context=ctx)
    assert isinstance(excinfo.value.__cause__, InvalidResponseError)
    assert not ctx.is_authenticated

    # Token missing from an otherwise JSON body
    async with _api(lambda req: httpx.Response(201, json={"message": "ok", "user": {"id": 3, "username": "grace"}})) as api:
        with pytest.raises(AuthFlowError):
            await register(api, "grace", "hopper1", context=ctx)
    assert not ctx.is_authenticated


async def test_restore_tears_down_on_refused_token():
    ctx = AuthContext()
    ctx.init(AuthUser(id=3, username="grace"), "old-token")
    body = {"title": "Forbidden", "status": 403, "detail": "Invalid or expired token"}
    async with _api(lambda req: httpx.Response(403, json=body)) as api:
        with pytest.raises(ReauthenticationRequired, match="Invalid or expired token"):
            await restore(api, "old-token", context=ctx)
    assert not ctx.is_authenticated


async def test_restore_accepts_valid_token_and_transport_errors_propagate():
    ctx = AuthContext()
    verify_body = {"valid": True, "user": {"id": 3, "username": "grace"}}
    async with _api(lambda req: httpx.Response(200, json=verify_body)) as api:
        user = await restore(api, "good-token", context=ctx)
    assert user.username == "grace"
    assert ctx.require()[1] == "good-token"

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    async with _api(refuse) as api:
        with pytest.raises(TransportFailure):
            await restore(api, "good-token", context=ctx)


async def test_logout_clears_the_process_wide_context():
    ctx = get_auth_context()
    ctx.init(AuthUser(id=9, username="linus"), "tok")
    logout()
    assert not get_auth_context().is_authenticated
