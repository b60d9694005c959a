"""Functional tests for service-side helpers that need no HTTP layer:
configuration loading, credential and token rules, answer payload intake
and the migrations runner.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine, inspect

from survey import config as config_module
from survey.config import DEV_JWT_SECRET, AuthConfig, load_config
from survey.db.migrations_runner import apply_migrations
from survey.logic.answers_intake import MAX_ROW_ID, AnswerPayloadError, parse_answer_payload, parse_row_id
from survey.logic.auth import (
    CredentialError,
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    validate_credentials,
    verify_password,
)
from survey.logic.question_bank import DEFAULT_QUESTIONS

SECRET = "unit-test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point config lookups at an empty tmp dir with no env overrides."""
    for key in (
        "TEST_DATABASE_URL",
        "DATABASE_URL",
        "JWT_SECRET",
        "JWT_ALGORITHM",
        "TOKEN_TTL_HOURS",
        "BCRYPT_ROUNDS",
        "MANDATORY_GROUP",
        "SURVEY_API_BASE_URL",
        "CORS_ALLOW_ORIGINS",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path / "config")
    monkeypatch.setattr(config_module, "ROOT_SURVEY_CONFIG", tmp_path / "survey_config.json")
    return tmp_path


# Configuration


def test_defaults_without_any_source(isolated_config):
    cfg = load_config()
    assert cfg.database.dsn.startswith("sqlite")
    assert cfg.auth.jwt_secret == DEV_JWT_SECRET
    assert cfg.auth.token_ttl_hours == 24
    assert cfg.auth.bcrypt_rounds == 10
    assert cfg.survey.mandatory_group == "Personal Information"
    assert cfg.cors.allow_origins == ["*"]


def test_precedence_env_over_files_over_json(isolated_config, monkeypatch):
    (isolated_config / "survey_config.json").write_text(
        json.dumps({"survey": {"mandatory_group": "From JSON"}, "auth": {"token_ttl_hours": 2}}),
        encoding="utf-8",
    )
    (isolated_config / "config").mkdir()
    (isolated_config / "config" / "survey.mandatory_group").write_text("From File\n", encoding="utf-8")
    cfg = load_config()
    assert cfg.survey.mandatory_group == "From File"
    assert cfg.auth.token_ttl_hours == 2

    monkeypatch.setenv("MANDATORY_GROUP", "From Env")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
    cfg = load_config()
    assert cfg.survey.mandatory_group == "From Env"
    assert cfg.cors.allow_origins == ["http://a.test", "http://b.test"]


def test_invalid_values_are_rejected(isolated_config, monkeypatch):
    monkeypatch.setenv("JWT_ALGORITHM", "none")
    with pytest.raises(ValidationError):
        load_config()
    monkeypatch.setenv("JWT_ALGORITHM", "HS256")
    monkeypatch.setenv("BCRYPT_ROUNDS", "2")
    with pytest.raises(ValidationError):
        load_config()


# Credentials and tokens


def test_credential_rules():
    validate_credentials("ada", "secret", registering=True)
    validate_credentials("a", "x", registering=False)
    with pytest.raises(CredentialError, match="required"):
        validate_credentials("", "secret", registering=False)
    with pytest.raises(CredentialError, match="at least 3"):
        validate_credentials("ad", "secret", registering=True)
    with pytest.raises(CredentialError, match="at least 6"):
        validate_credentials("ada", "short", registering=True)
    with pytest.raises(CredentialError, match="72 bytes"):
        validate_credentials("ada", "x" * 73, registering=True)


def test_password_hash_roundtrip():
    hashed = hash_password("secret123", rounds=4)
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_token_claims_and_expiry():
    cfg = AuthConfig(jwt_secret=SECRET, token_ttl_hours=1)
    issued = datetime.now(timezone.utc).replace(microsecond=0)
    claims = decode_access_token(create_access_token(42, "ada", cfg, now=issued), cfg)
    assert (claims.user_id, claims.username) == (42, "ada")
    assert claims.expires_at == issued + timedelta(hours=1)

    stale = create_access_token(42, "ada", cfg, now=issued - timedelta(hours=2))
    with pytest.raises(TokenError):
        decode_access_token(stale, cfg)

    other = AuthConfig(jwt_secret=SECRET + "-rotated")
    with pytest.raises(TokenError):
        decode_access_token(create_access_token(42, "ada", cfg), other)


# Answer payload intake


def test_payload_must_carry_answer_array():
    for bad in (None, [], {"answers": []}, {"answer": {"question_id": 1}}):
        with pytest.raises(AnswerPayloadError, match="Expected answer array"):
            parse_answer_payload(bad)


def test_payload_items_are_filtered_and_coerced():
    pairs = parse_answer_payload(
        {
            "answer": [
                {"question_id": 1, "answer": "x"},
                {"question_id": 0, "answer": "zero id skipped"},
                {"question_id": 2},
                {"question_id": " 3 ", "answer": None},
                {"question_id": 4, "answer": 5.5},
            ]
        }
    )
    assert pairs == [(1, "x"), (3, None), (4, "5.5")]
    with pytest.raises(AnswerPayloadError):
        parse_answer_payload({"answer": [{"question_id": "abc", "answer": "x"}]})
    with pytest.raises(AnswerPayloadError):
        parse_answer_payload({"answer": [{"question_id": 1, "answer": ["nested"]}]})


def test_row_ids_are_ascii_decimal_within_sixty_four_bits():
    assert parse_row_id("42") == 42
    assert parse_row_id(" 7 ") == 7
    assert parse_row_id(str(MAX_ROW_ID)) == MAX_ROW_ID
    for text in ("", "0", "-1", "+1", "1.0", "²", "١٢", "4²", str(MAX_ROW_ID + 1), "1" * 400):
        assert parse_row_id(text) is None, text


def test_out_of_range_question_ids_are_rejected_not_stored():
    for raw in ("²", 2**70, str(2**64), -5, True, 2.0):
        with pytest.raises(AnswerPayloadError, match="Invalid question_id"):
            parse_answer_payload({"answer": [{"question_id": raw, "answer": "x"}]})
    assert parse_answer_payload({"answer": [{"question_id": MAX_ROW_ID, "answer": "x"}]}) == [(MAX_ROW_ID, "x")]


# Migrations and seed data


def test_migrations_apply_once_and_journal(tmp_path):
    from survey.db.migrations_runner import default_migrations_dir

    engine = create_engine(f"sqlite:///{tmp_path / 'm.db'}")
    journal = tmp_path / "journal.json"
    root = default_migrations_dir(engine)
    assert root.name == "sqlite_migrations"

    applied = apply_migrations(engine, migrations_dir=root, journal_path=journal)
    assert applied == ["001_init.sql", "002_indexes.sql"]
    assert {"auth_users", "questions", "responses"} <= set(inspect(engine).get_table_names())
    entries = json.loads(journal.read_text(encoding="utf-8"))
    assert [e["filename"] for e in entries] == ["sqlite_migrations/001_init.sql", "sqlite_migrations/002_indexes.sql"]

    assert apply_migrations(engine, migrations_dir=root, journal_path=journal) == []
    engine.dispose()


def test_default_question_bank_shape():
    assert len(DEFAULT_QUESTIONS) == 19
    mandatory = [q for q in DEFAULT_QUESTIONS if q["field"] == "Personal Information"]
    assert [q["input_type"] for q in mandatory] == ["text", "number", "email", "tel", "text"]
