"""Settings for the survey service and questionnaire client.

Every setting is resolved from the first source that provides it:

1. an environment variable,
2. a one-value text file under `config/` named after the setting,
3. `survey_config.json` at the project root (nested by section),
4. a development default.

The result is validated by the pydantic models below.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_SURVEY_CONFIG = Path("survey_config.json")
DEV_JWT_SECRET = "development-only-insecure-secret-key-32ch"
DEFAULT_MANDATORY_GROUP = "Personal Information"
DEFAULT_API_BASE_URL = "http://localhost:5001"
logger = logging.getLogger(__name__)


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("database.dsn must not be blank")
        return v


class AuthConfig(BaseModel):
    jwt_secret: str
    jwt_algorithm: str = Field(default="HS256")
    token_ttl_hours: int = Field(default=24, gt=0)
    # bcrypt accepts cost factors 4..31
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    @field_validator("jwt_algorithm")
    @classmethod
    def algorithm_must_be_hmac(cls, v: str) -> str:
        allowed = {"HS256", "HS384", "HS512"}
        if v not in allowed:
            raise ValueError(f"auth.jwt_algorithm must be one of {sorted(allowed)}")
        return v


class SurveyConfig(BaseModel):
    mandatory_group: str = Field(default=DEFAULT_MANDATORY_GROUP, min_length=1)
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL)


class CorsConfig(BaseModel):
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    database: DatabaseConfig
    auth: AuthConfig
    survey: SurveyConfig
    cors: CorsConfig


def _load_json_settings(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("config_json_unreadable path=%s error=%s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _override_file(name: str) -> Optional[str]:
    path = CONFIG_DIR / name
    if not path.exists():
        return None
    try:
        return path.read_text(encoding="utf-8").strip() or None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("config_override_unreadable path=%s error=%s", path, e)
        return None


def _json_value(settings: Dict[str, Any], dotted: str) -> Any:
    node: Any = settings
    for part in dotted.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def _setting(settings: Dict[str, Any], env_key: str, dotted: str, default: Any = None) -> Any:
    """Resolve one setting; `dotted` names both the config/ file and the JSON path."""
    for value in (os.environ.get(env_key), _override_file(dotted), _json_value(settings, dotted)):
        if value is not None and value != "":
            return value
    return default


def _resolve_jwt_secret(raw: Optional[str]) -> str:
    if not raw:
        logger.warning("JWT_SECRET not set; using insecure development default")
        return DEV_JWT_SECRET
    if len(raw) < 32:
        logger.warning("JWT_SECRET shorter than 32 characters; tokens are weakly signed")
    return raw


def _origins(raw: Any) -> List[str]:
    if isinstance(raw, list):
        return [str(o) for o in raw]
    return [o.strip() for o in str(raw).split(",") if o.strip()]


def load_config() -> AppConfig:
    """Build and validate the AppConfig; invalid values raise ValidationError."""
    settings = _load_json_settings(ROOT_SURVEY_CONFIG)
    dsn = os.environ.get("TEST_DATABASE_URL") or _setting(
        settings, "DATABASE_URL", "database.dsn", "sqlite+pysqlite:///:memory:"
    )
    try:
        return AppConfig(
            database=DatabaseConfig(dsn=str(dsn)),
            auth=AuthConfig(
                jwt_secret=_resolve_jwt_secret(_setting(settings, "JWT_SECRET", "auth.jwt_secret")),
                jwt_algorithm=str(_setting(settings, "JWT_ALGORITHM", "auth.jwt_algorithm", "HS256")).strip(),
                token_ttl_hours=_setting(settings, "TOKEN_TTL_HOURS", "auth.token_ttl_hours", 24),
                bcrypt_rounds=_setting(settings, "BCRYPT_ROUNDS", "auth.bcrypt_rounds", 10),
            ),
            survey=SurveyConfig(
                mandatory_group=str(_setting(settings, "MANDATORY_GROUP", "survey.mandatory_group", DEFAULT_MANDATORY_GROUP)),
                api_base_url=str(_setting(settings, "SURVEY_API_BASE_URL", "survey.api_base_url", DEFAULT_API_BASE_URL)).rstrip("/"),
            ),
            cors=CorsConfig(allow_origins=_origins(_setting(settings, "CORS_ALLOW_ORIGINS", "cors.allow_origins", ["*"]))),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "AuthConfig",
    "CorsConfig",
    "DatabaseConfig",
    "SurveyConfig",
    "DEFAULT_MANDATORY_GROUP",
    "load_config",
]
