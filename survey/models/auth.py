"""Pydantic models for the /auth endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class Credentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AuthUser(BaseModel):
    id: int
    username: str
    created_at: Optional[str] = None


class AuthResult(BaseModel):
    message: str
    token: str
    user: AuthUser


class VerifyResult(BaseModel):
    valid: bool
    user: AuthUser


__all__ = ["Credentials", "AuthUser", "AuthResult", "VerifyResult"]
