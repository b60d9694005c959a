"""Engine lifecycle for the survey database.

Repositories issue SQL through `sqlalchemy.text` against the shared engine
returned here; there are no ORM models. PostgreSQL is the production
target, SQLite serves development and tests.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

DEFAULT_URL = "sqlite+pysqlite:///:memory:"

_engine: Engine | None = None
_engine_url: str | None = None


def database_url() -> str:
    return os.getenv("TEST_DATABASE_URL") or os.getenv("DATABASE_URL") or DEFAULT_URL


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"pool_pre_ping": True}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        # Sync route handlers run on a worker thread pool
        options["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            # One shared connection, otherwise each checkout sees an empty DB
            options["poolclass"] = StaticPool
    return options


def get_engine(url: str | None = None) -> Engine:
    """Return the shared Engine, rebuilding it when a different URL is asked for."""
    global _engine, _engine_url
    target = url or _engine_url or database_url()
    if _engine is not None and _engine_url == target:
        return _engine
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(target, **_engine_options(target))
    _engine_url = target
    logger.info("db_engine_created backend=%s", _engine.dialect.name)
    return _engine


__all__ = ["DEFAULT_URL", "database_url", "get_engine"]
