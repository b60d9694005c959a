"""Credential rules, password hashing and bearer token handling.

Passwords are hashed with bcrypt. Bearer tokens are HS-signed JWTs carrying
the user id (`sub`) and username, time-boxed by `auth.token_ttl_hours`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from jwt.exceptions import InvalidTokenError

from survey.config import AuthConfig

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
# bcrypt only considers the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class CredentialError(ValueError):
    """Submitted credentials break a registration or login rule."""


class TokenError(Exception):
    """A bearer token is malformed, badly signed or expired."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    username: str
    expires_at: datetime


def validate_credentials(username: Optional[str], password: Optional[str], *, registering: bool) -> None:
    """Raise CredentialError when the pair breaks a rule.

    Login only requires both values; registration also enforces minimum
    lengths.
    """
    if not username or not password:
        raise CredentialError("Username and password are required")
    if not registering:
        return
    if len(username) < MIN_USERNAME_LENGTH:
        raise CredentialError(f"Username must be at least {MIN_USERNAME_LENGTH} characters long")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise CredentialError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise CredentialError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")


def hash_password(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:MAX_PASSWORD_BYTES], hashed.encode("utf-8"))
    except ValueError:
        logger.error("password_hash_unreadable", exc_info=True)
        return False


def create_access_token(user_id: int, username: str, config: AuthConfig, *, now: datetime | None = None) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "username": username,
        "iat": issued,
        "exp": issued + timedelta(hours=config.token_ttl_hours),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: AuthConfig) -> TokenClaims:
    """Return the claims of a valid token or raise TokenError."""
    try:
        payload = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
        user_id = int(payload["sub"])
    except (InvalidTokenError, KeyError, ValueError) as exc:
        logger.info("token_rejected reason=%s", type(exc).__name__)
        raise TokenError(str(exc)) from exc
    return TokenClaims(
        user_id=user_id,
        username=str(payload.get("username") or ""),
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
    )


__all__ = [
    "CredentialError",
    "TokenError",
    "TokenClaims",
    "validate_credentials",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
]
