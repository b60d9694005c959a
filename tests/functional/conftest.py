"""Functional test bootstrap.

Points the service at a file-backed SQLite database under tmp/, applies the
SQLite migrations once per session with a journal kept beside the database,
and seeds the default question bank. The environment is set before any
import of survey.main so `load_config` picks it up.
"""

from __future__ import annotations

import os
import pathlib
import uuid
from typing import Any, Callable, Dict

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_TMP = _ROOT / "tmp"
_TMP.mkdir(parents=True, exist_ok=True)
_DB_FILE = _TMP / "functional_tests.db"
_JOURNAL = _TMP / "functional_tests_journal.json"
for _stale in (_DB_FILE, _JOURNAL):
    if _stale.exists():
        _stale.unlink()

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"
os.environ["SEED_QUESTIONS"] = "0"
os.environ["JWT_SECRET"] = "functional-tests-secret-with-enough-length"
# Lowest bcrypt cost keeps registration fast under test
os.environ["BCRYPT_ROUNDS"] = "4"


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap():
    """Apply migrations and seed questions once for the shared DB."""
    from survey.db.base import get_engine
    from survey.db.migrations_runner import apply_migrations
    from survey.logic.question_bank import seed_questions

    engine = get_engine(os.environ["TEST_DATABASE_URL"])
    apply_migrations(engine, migrations_dir=_ROOT / "sqlite_migrations", journal_path=_JOURNAL)
    seed_questions()
    yield


@pytest.fixture(scope="session")
def app():
    from survey.main import create_app

    return create_app()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def username() -> str:
    return f"user_{uuid.uuid4().hex[:10]}"


@pytest.fixture
def make_account(client) -> Callable[[], Dict[str, Any]]:
    """Factory registering a fresh account: {username, password, token, user}."""

    def _make() -> Dict[str, Any]:
        name = f"user_{uuid.uuid4().hex[:10]}"
        password = "secret123"
        resp = client.post("/auth/register", json={"username": name, "password": password})
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return {"username": name, "password": password, "token": body["token"], "user": body["user"]}

    return _make


@pytest.fixture
def account(make_account) -> Dict[str, Any]:
    return make_account()
