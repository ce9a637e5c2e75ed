"""Per-user knowledge ledger.

Two distinct counters live here and must not be mixed up:

* question mastery: ``knowledge_level`` moves +1 on a correct answer and -1
  on a miss, clamped to [0, 3];
* language entry streak: ``correct_streak`` grows by 1 (capped at 3) on a
  correct answer and drops to 0 on any miss.

Each update is a single ``INSERT ... ON CONFLICT DO UPDATE`` statement so that
concurrent answers for the same pair serialize inside SQLite instead of racing
on a read-then-write.
"""
from __future__ import annotations

from typing import Optional

MIN_LEVEL = 0
MAX_LEVEL = 3

# Streaks are clamped on read as well as on write
CLAMPED_STREAK_SQL = f"MIN(MAX(correct_streak, {MIN_LEVEL}), {MAX_LEVEL})"


def clamp_level(value: int) -> int:
    return max(MIN_LEVEL, min(MAX_LEVEL, int(value)))


def upsert_question_mastery(conn, user_id: int, question_id: int, is_correct: bool) -> Optional[int]:
    """Apply one graded answer to a strict question and return the new level.

    Returns None when nothing was written (question missing, not strict, or
    on a theme owned by someone else).
    """
    delta = 1 if is_correct else -1
    seed = 1 if is_correct else 0
    cursor = conn.cursor()
    cursor.execute(
        f"""
        INSERT INTO user_question_stats (user_id, question_id, knowledge_level)
        SELECT ?, q.id, ?
        FROM questions q
        JOIN themes t ON t.id = q.theme_id
        WHERE q.id = ? AND q.is_strict = 1 AND t.user_id = ?
        ON CONFLICT(user_id, question_id) DO UPDATE SET
            knowledge_level = MAX({MIN_LEVEL}, MIN({MAX_LEVEL}, user_question_stats.knowledge_level + ?)),
            updated_at = datetime('now')
        RETURNING knowledge_level
        """,
        (user_id, seed, question_id, user_id, delta),
    )
    rows = cursor.fetchall()
    if not rows:
        return None
    return int(rows[0][0])


def upsert_entry_streak(conn, user_id: int, entry_id: int, is_correct: bool) -> Optional[int]:
    """Apply one graded answer to a language entry and return the new streak.

    The entry's theme must belong to ``user_id``; otherwise nothing is written
    and None is returned.
    """
    seed = 1 if is_correct else 0
    cursor = conn.cursor()
    cursor.execute(
        f"""
        INSERT INTO user_language_entry_stats (user_id, entry_id, correct_streak)
        SELECT ?, le.id, ?
        FROM language_entries le
        JOIN themes t ON t.id = le.theme_id
        WHERE le.id = ? AND t.user_id = ?
        ON CONFLICT(user_id, entry_id) DO UPDATE SET
            correct_streak = CASE
                WHEN ? THEN MIN({MAX_LEVEL}, MAX({MIN_LEVEL}, user_language_entry_stats.correct_streak) + 1)
                ELSE {MIN_LEVEL}
            END,
            updated_at = datetime('now')
        RETURNING correct_streak
        """,
        (user_id, seed, entry_id, user_id, 1 if is_correct else 0),
    )
    rows = cursor.fetchall()
    if not rows:
        return None
    return clamp_level(rows[0][0])


def get_question_level(conn, user_id: int, question_id: int) -> Optional[int]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT knowledge_level
        FROM user_question_stats
        WHERE user_id = ? AND question_id = ?
        """,
        (user_id, question_id),
    )
    row = cursor.fetchone()
    if not row:
        return None
    return clamp_level(row[0])


def get_entry_streak(conn, user_id: int, entry_id: int) -> Optional[int]:
    cursor = conn.cursor()
    cursor.execute(
        f"""
        SELECT {CLAMPED_STREAK_SQL}
        FROM user_language_entry_stats
        WHERE user_id = ? AND entry_id = ?
        """,
        (user_id, entry_id),
    )
    row = cursor.fetchone()
    if not row:
        return None
    return int(row[0])
