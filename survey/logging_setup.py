"""Central logging configuration for the survey service.

Installs a single stdout handler on the root logger so module loggers emit
without per-module setup. The level comes from LOG_LEVEL (default INFO);
uvicorn loggers are routed to the same handler.
"""
from __future__ import annotations
import logging
import os
from logging.config import dictConfig


def _build_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "uvicorn": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": level, "handlers": ["console"], "propagate": False},
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Configure application-wide logging once.

    Returns early when the root logger already has handlers so reloaders and
    repeated app factories do not duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    resolved = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    if not isinstance(logging.getLevelName(resolved), int):
        resolved = "INFO"
    dictConfig(_build_config(resolved))
