"""Recording of finished play sessions.

The session summary is committed first; ledger updates follow one by one. An
item rejected by a constraint is logged and skipped. Other storage errors
(a locked database, for one) propagate so the caller sees the failure. There
is no transaction spanning the batch: after a crash the summary may exist
with only part of the ledger updated.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Dict

from models.game import SessionResultCreate
from utils.ledger import upsert_entry_streak, upsert_question_mastery

logger = logging.getLogger(__name__)


def insert_session_summary(conn, user_id: int, payload: SessionResultCreate) -> int:
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO user_games (user_id, questions_answered, correct_answers, max_correct_in_row)
        VALUES (?, ?, ?, ?)
        """,
        (
            user_id,
            payload.questions_answered,
            payload.correct_answers,
            payload.max_correct_in_row,
        ),
    )
    game_id = cursor.lastrowid
    conn.commit()
    return game_id


def record_session_result(conn, user_id: int, payload: SessionResultCreate) -> Dict[str, bool]:
    game_id = insert_session_summary(conn, user_id, payload)
    applied = 0
    skipped = 0
    for item in payload.per_question:
        if item.question_id is None:
            continue
        try:
            level = upsert_question_mastery(conn, user_id, item.question_id, item.is_correct)
        except sqlite3.IntegrityError as exc:
            logger.warning("Skipping question %s for user %s: %s", item.question_id, user_id, exc)
            skipped += 1
            continue
        if level is None:
            skipped += 1
        else:
            applied += 1
    for item in payload.language_entry_results:
        try:
            streak = upsert_entry_streak(conn, user_id, item.entry_id, item.is_correct)
        except sqlite3.IntegrityError as exc:
            logger.warning("Skipping language entry %s for user %s: %s", item.entry_id, user_id, exc)
            skipped += 1
            continue
        if streak is None:
            skipped += 1
        else:
            applied += 1
    conn.commit()
    logger.info(
        "Recorded game %s for user %s: %s answered, %s correct, %s ledger updates (%s skipped)",
        game_id,
        user_id,
        payload.questions_answered,
        payload.correct_answers,
        applied,
        skipped,
    )
    return {"accepted": True}
