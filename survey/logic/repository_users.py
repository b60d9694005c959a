"""Auth user data access helpers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.exc import IntegrityError

from survey.db.base import get_engine
from survey.logic.timestamps import to_iso, utc_now_iso


class UsernameTakenError(Exception):
    pass


def _row_to_user(row: Any) -> Dict[str, Any]:
    return {
        "id": int(row["id"]),
        "username": str(row["username"]),
        "created_at": to_iso(row["created_at"]),
    }


def username_exists(username: str) -> bool:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT 1 FROM auth_users WHERE username = :u"),
            {"u": username},
        ).fetchone()
    return row is not None


def create_user(username: str, password_hash: str) -> Dict[str, Any]:
    """Insert an auth user and return its public fields.

    Raises UsernameTakenError when the unique constraint rejects the row,
    which covers a concurrent registration racing the existence check.
    """
    eng = get_engine()
    try:
        with eng.begin() as conn:
            row = conn.execute(
                sql_text(
                    """
                    INSERT INTO auth_users (username, password_hash, created_at)
                    VALUES (:u, :h, :created_at)
                    RETURNING id, username, created_at
                    """
                ),
                {"u": username, "h": password_hash, "created_at": utc_now_iso()},
            ).mappings().one()
    except IntegrityError as exc:
        raise UsernameTakenError(username) from exc
    return _row_to_user(row)


def get_user_with_hash(username: str) -> Optional[Dict[str, Any]]:
    """Return the user row including `password_hash`, or None."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(
                "SELECT id, username, password_hash, created_at FROM auth_users WHERE username = :u"
            ),
            {"u": username},
        ).mappings().fetchone()
    if row is None:
        return None
    user = _row_to_user(row)
    user["password_hash"] = str(row["password_hash"])
    return user
