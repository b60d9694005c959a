"""Answer data access helpers.

Encapsulates the writes behind POST /user-answers and the joined read behind
GET /user-answers/{user_id}.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Tuple

from sqlalchemy import text as sql_text

from survey.db.base import get_engine
from survey.logic.timestamps import to_iso, utc_now_iso

logger = logging.getLogger(__name__)


def insert_answers(user_id: int, items: Iterable[Tuple[int, str]]) -> List[Dict[str, Any]]:
    """Insert (question_id, answer) pairs for a user in one transaction.

    Returns the persisted rows in insertion order.
    """
    eng = get_engine()
    created_at = utc_now_iso()
    results: List[Dict[str, Any]] = []
    with eng.begin() as conn:
        for question_id, answer in items:
            row = conn.execute(
                sql_text(
                    """
                    INSERT INTO responses (user_id, question_id, answer, created_at)
                    VALUES (:uid, :qid, :answer, :created_at)
                    RETURNING id, user_id, question_id, answer, created_at
                    """
                ),
                {"uid": user_id, "qid": question_id, "answer": answer, "created_at": created_at},
            ).mappings().one()
            results.append(
                {
                    "id": int(row["id"]),
                    "user_id": int(row["user_id"]),
                    "question_id": int(row["question_id"]),
                    "answer": row["answer"],
                    "created_at": to_iso(row["created_at"]),
                }
            )
    logger.info("answers_inserted user_id=%s count=%s", user_id, len(results))
    return results


def list_answers_for_user(user_id: int) -> List[Dict[str, Any]]:
    """Return a user's answers joined with question metadata, by question id."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT r.id,
                       r.user_id,
                       r.question_id,
                       r.answer,
                       r.created_at,
                       q.title,
                       q.description,
                       q.input_type,
                       q.field
                FROM responses r
                JOIN questions q ON r.question_id = q.id
                WHERE r.user_id = :uid
                ORDER BY q.id ASC, r.id ASC
                """
            ),
            {"uid": user_id},
        ).mappings().all()
    return [
        {
            "id": int(r["id"]),
            "user_id": int(r["user_id"]),
            "question_id": int(r["question_id"]),
            "answer": r["answer"],
            "created_at": to_iso(r["created_at"]),
            "title": r["title"],
            "description": r["description"],
            "input_type": r["input_type"],
            "field": r["field"],
        }
        for r in rows
    ]
