"""Timestamp helpers for persisted rows.

Rows are written with an explicit RFC3339 UTC timestamp so SQLite and
PostgreSQL return the same representation to clients.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def to_iso(value: Any) -> Optional[str]:
    """Normalise a DB timestamp (datetime or text) to an RFC3339 string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    return str(value)
