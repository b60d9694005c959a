"""Question data access helpers."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from sqlalchemy import text as sql_text

from survey.db.base import get_engine
from survey.logic.timestamps import to_iso, utc_now_iso


def list_questions() -> List[Dict[str, Any]]:
    """Return every question ordered by id."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT id, title, description, input_type, field, created_at
                FROM questions
                ORDER BY id ASC
                """
            )
        ).mappings().all()
    return [
        {
            "id": int(r["id"]),
            "title": r["title"],
            "description": r["description"],
            "input_type": r["input_type"],
            "field": r["field"],
            "created_at": to_iso(r["created_at"]),
        }
        for r in rows
    ]


def count_questions() -> int:
    eng = get_engine()
    with eng.connect() as conn:
        return int(conn.execute(sql_text("SELECT COUNT(*) FROM questions")).scalar() or 0)


def existing_question_ids(question_ids: Iterable[int]) -> set[int]:
    ids = sorted({int(q) for q in question_ids})
    if not ids:
        return set()
    eng = get_engine()
    params = {f"q{i}": qid for i, qid in enumerate(ids)}
    placeholders = ", ".join(f":{k}" for k in params)
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(f"SELECT id FROM questions WHERE id IN ({placeholders})"),
            params,
        ).fetchall()
    return {int(r[0]) for r in rows}


def insert_questions(questions: Iterable[Dict[str, Any]]) -> int:
    """Insert question definitions in order; return the number inserted."""
    eng = get_engine()
    inserted = 0
    with eng.begin() as conn:
        for q in questions:
            conn.execute(
                sql_text(
                    """
                    INSERT INTO questions (title, description, input_type, field, created_at)
                    VALUES (:title, :description, :input_type, :field, :created_at)
                    """
                ),
                {
                    "title": q["title"],
                    "description": q.get("description"),
                    "input_type": q["input_type"],
                    "field": q["field"],
                    "created_at": utc_now_iso(),
                },
            )
            inserted += 1
    return inserted
