from __future__ import annotations

import logging
import os
from typing import Callable

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from survey.config import AppConfig, load_config
from survey.db.base import get_engine
from survey.db.migrations_runner import apply_migrations
from survey.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from survey.http.request_id import RequestIdMiddleware
from survey.logging_setup import configure_logging
from survey.logic.question_bank import seed_questions
from survey.middleware.cors import apply_cors
from survey.routes import api_router

logger = logging.getLogger(__name__)


def _flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("health_db_check_failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def create_app(config: AppConfig | None = None) -> FastAPI:
    configure_logging()
    cfg = config or load_config()
    get_engine(cfg.database.dsn)

    app = FastAPI(title="Survey Service")
    app.state.config = cfg

    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    apply_cors(app, origins=cfg.cors.allow_origins)
    app.add_middleware(RequestIdMiddleware)

    # Migrations and seeding run on startup, never at import time
    @app.on_event("startup")
    def _prepare_database() -> None:  # pragma: no cover - exercised via integration
        engine = get_engine()
        if _flag("AUTO_APPLY_MIGRATIONS"):
            try:
                applied = apply_migrations(engine)
            except Exception:
                logger.error("startup_migrations_failed", exc_info=True)
                raise
            logger.info("startup_migrations_applied files=%s", applied)
        else:
            logger.info("startup_migrations_skipped")
        if _flag("SEED_QUESTIONS"):
            seed_questions()

    app.include_router(api_router)

    health_check = _health_check()

    @app.get("/health")
    def health():
        return health_check()

    @app.get("/test")
    def smoke():
        return {"message": "Server is working"}

    logger.info("app_created mandatory_group=%s", cfg.survey.mandatory_group)
    return app


# No module-level app; serve through the factory: uvicorn survey.main:create_app --factory --port 5001
