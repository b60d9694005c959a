"""Registration, login and token verification endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from survey.guards.auth import get_config, require_user
from survey.http.problem import problem
from survey.logic.auth import (
    CredentialError,
    TokenClaims,
    create_access_token,
    hash_password,
    validate_credentials,
    verify_password,
)
from survey.logic.events import USER_REGISTERED, publish
from survey.logic.repository_users import (
    UsernameTakenError,
    create_user,
    get_user_with_hash,
    username_exists,
)
from survey.models.auth import AuthResult, AuthUser, Credentials, VerifyResult


router = APIRouter(prefix="/auth")
logger = logging.getLogger(__name__)


@router.post(
    "/register",
    summary="Create an account and issue a bearer token",
    operation_id="register",
    status_code=201,
    response_model=AuthResult,
)
def register(body: Credentials, request: Request):
    try:
        validate_credentials(body.username, body.password, registering=True)
    except CredentialError as exc:
        raise problem(400, str(exc))
    username = str(body.username)
    if username_exists(username):
        raise problem(400, "Username already exists")

    cfg = get_config(request)
    try:
        user = create_user(username, hash_password(str(body.password), cfg.auth.bcrypt_rounds))
    except UsernameTakenError:
        raise problem(400, "Username already exists")

    token = create_access_token(user["id"], user["username"], cfg.auth)
    publish(USER_REGISTERED, {"user_id": user["id"]})
    logger.info("user_registered user_id=%s", user["id"])
    result = AuthResult(message="User registered successfully", token=token, user=AuthUser(**user))
    return JSONResponse(result.model_dump(), status_code=201)


@router.post(
    "/login",
    summary="Exchange credentials for a bearer token",
    operation_id="login",
    response_model=AuthResult,
)
def login(body: Credentials, request: Request):
    try:
        validate_credentials(body.username, body.password, registering=False)
    except CredentialError as exc:
        raise problem(400, str(exc))

    user = get_user_with_hash(str(body.username))
    if user is None or not verify_password(str(body.password), user.pop("password_hash")):
        logger.info("login_failed username_known=%s", user is not None)
        raise problem(401, "Invalid username or password")

    token = create_access_token(user["id"], user["username"], get_config(request).auth)
    logger.info("login_succeeded user_id=%s", user["id"])
    return AuthResult(message="Login successful", token=token, user=AuthUser(**user))


@router.get(
    "/verify",
    summary="Confirm a bearer token is valid",
    operation_id="verifyToken",
    response_model=VerifyResult,
)
def verify(claims: TokenClaims = Depends(require_user)):
    return VerifyResult(valid=True, user=AuthUser(id=claims.user_id, username=claims.username))


__all__ = ["router"]
