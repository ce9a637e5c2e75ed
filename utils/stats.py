"""Knowledge statistics folded into the fixed four-bucket histogram.

Levels 0-3 map to ``dontKnow``, ``know``, ``wellKnow`` and ``perfectlyKnow``.
Graded items without a ledger row (never attempted) are counted as
``dontKnow``.
"""
from __future__ import annotations

from typing import Dict, Iterable, Tuple

from utils.content import require_theme_access
from utils.ledger import CLAMPED_STREAK_SQL, MAX_LEVEL, MIN_LEVEL, clamp_level

BUCKET_NAMES = ("dontKnow", "know", "wellKnow", "perfectlyKnow")


def empty_distribution() -> Dict[int, int]:
    return {level: 0 for level in range(MIN_LEVEL, MAX_LEVEL + 1)}


def fold_levels(distribution: Dict[int, int], rows: Iterable[Tuple[int, int]]) -> Dict[int, int]:
    """Add (level, count) rows into the histogram."""
    for level, count in rows:
        distribution[clamp_level(level)] += int(count or 0)
    return distribution


def apply_backfill(distribution: Dict[int, int], graded_items: int) -> Dict[int, int]:
    """Count graded items that have no ledger row yet as level 0."""
    shortfall = int(graded_items) - sum(distribution.values())
    if shortfall > 0:
        distribution[MIN_LEVEL] += shortfall
    return distribution


def distribution_payload(distribution: Dict[int, int]) -> Dict[str, int]:
    return {name: distribution.get(level, 0) for level, name in enumerate(BUCKET_NAMES)}


def _scalar(cursor, sql: str, params: Tuple = ()) -> int:
    cursor.execute(sql, params)
    row = cursor.fetchone()
    return int(row[0] or 0) if row else 0


def get_global_stats(conn) -> Dict:
    cursor = conn.cursor()
    total_users = _scalar(cursor, "SELECT COUNT(*) FROM users")
    total_themes = _scalar(cursor, "SELECT COUNT(*) FROM themes")
    # Non-strict questions count here but never in the distribution
    total_classic = _scalar(cursor, "SELECT COUNT(*) FROM questions")
    strict_classic = _scalar(cursor, "SELECT COUNT(*) FROM questions WHERE is_strict = 1")
    total_entries = _scalar(cursor, "SELECT COUNT(*) FROM language_entries")
    cursor.execute(
        """
        SELECT COUNT(*), COALESCE(SUM(questions_answered), 0)
        FROM user_games
        """
    )
    games_row = cursor.fetchone()

    distribution = empty_distribution()
    cursor.execute(
        """
        SELECT uqs.knowledge_level, COUNT(*)
        FROM user_question_stats uqs
        JOIN questions q ON q.id = uqs.question_id
        WHERE q.is_strict = 1
        GROUP BY uqs.knowledge_level
        """
    )
    fold_levels(distribution, cursor.fetchall())
    cursor.execute(
        f"""
        SELECT {CLAMPED_STREAK_SQL} AS level, COUNT(*)
        FROM user_language_entry_stats
        GROUP BY level
        """
    )
    fold_levels(distribution, cursor.fetchall())
    apply_backfill(distribution, strict_classic + total_entries)

    return {
        "totalUsers": total_users,
        "totalThemes": total_themes,
        "totalQuestions": total_classic + total_entries,
        "totalGamesPlayed": int(games_row[0] or 0),
        "totalQuestionsAnswered": int(games_row[1] or 0),
        "knowledgeDistribution": distribution_payload(distribution),
    }


def get_profile_stats(conn, user_id: int) -> Dict:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT
            COUNT(*) AS total_games,
            COALESCE(SUM(questions_answered), 0) AS total_questions_answered,
            COALESCE(MAX(max_correct_in_row), 0) AS best_correct_in_row
        FROM user_games
        WHERE user_id = ?
        """,
        (user_id,),
    )
    games_row = cursor.fetchone()
    # Most recent session's streak, kept apart from the all-time best
    current_correct_in_row = _scalar(
        cursor,
        """
        SELECT max_correct_in_row
        FROM user_games
        WHERE user_id = ?
        ORDER BY played_at DESC, id DESC
        LIMIT 1
        """,
        (user_id,),
    )
    cursor.execute(
        """
        SELECT
            COALESCE(SUM(CASE WHEN q.is_strict = 1 THEN 1 ELSE 0 END), 0) AS strict_questions,
            COALESCE(SUM(CASE WHEN q.is_strict = 1 THEN 0 ELSE 1 END), 0) AS non_strict_questions
        FROM questions q
        JOIN themes t ON t.id = q.theme_id
        WHERE t.user_id = ?
        """,
        (user_id,),
    )
    counts_row = cursor.fetchone()
    entries_count = _scalar(
        cursor,
        """
        SELECT COUNT(*)
        FROM language_entries le
        JOIN themes t ON t.id = le.theme_id
        WHERE t.user_id = ?
        """,
        (user_id,),
    )
    strict_count = int(counts_row["strict_questions"] or 0) + entries_count
    non_strict_count = int(counts_row["non_strict_questions"] or 0)

    distribution = empty_distribution()
    cursor.execute(
        """
        SELECT uqs.knowledge_level, COUNT(*)
        FROM user_question_stats uqs
        JOIN questions q ON q.id = uqs.question_id
        JOIN themes t ON t.id = q.theme_id
        WHERE uqs.user_id = ? AND t.user_id = ? AND q.is_strict = 1
        GROUP BY uqs.knowledge_level
        """,
        (user_id, user_id),
    )
    fold_levels(distribution, cursor.fetchall())
    cursor.execute(
        f"""
        SELECT {CLAMPED_STREAK_SQL} AS level, COUNT(*)
        FROM user_language_entry_stats ues
        JOIN language_entries le ON le.id = ues.entry_id
        JOIN themes t ON t.id = le.theme_id
        WHERE ues.user_id = ? AND t.user_id = ?
        GROUP BY level
        """,
        (user_id, user_id),
    )
    fold_levels(distribution, cursor.fetchall())
    apply_backfill(distribution, strict_count)

    return {
        "totalGames": int(games_row["total_games"] or 0),
        "totalQuestionsAnswered": int(games_row["total_questions_answered"] or 0),
        "bestCorrectInRow": int(games_row["best_correct_in_row"] or 0),
        "currentCorrectInRow": current_correct_in_row,
        "questionsCounts": {"strict": strict_count, "nonStrict": non_strict_count},
        "knowledgeDistribution": distribution_payload(distribution),
    }


def get_theme_stats(conn, user_id: int, theme_id: int) -> Dict:
    """Distribution for one theme the user owns (403 for foreign themes, 404 if absent)."""
    theme = require_theme_access(conn, user_id, theme_id)
    cursor = conn.cursor()
    distribution = empty_distribution()
    if theme["is_language_topic"]:
        strict_count = _scalar(
            cursor, "SELECT COUNT(*) FROM language_entries WHERE theme_id = ?", (theme_id,)
        )
        non_strict_count = 0
        cursor.execute(
            f"""
            SELECT {CLAMPED_STREAK_SQL} AS level, COUNT(*)
            FROM user_language_entry_stats ues
            JOIN language_entries le ON le.id = ues.entry_id
            WHERE le.theme_id = ? AND ues.user_id = ?
            GROUP BY level
            """,
            (theme_id, user_id),
        )
    else:
        cursor.execute(
            """
            SELECT
                COALESCE(SUM(CASE WHEN is_strict = 1 THEN 1 ELSE 0 END), 0),
                COALESCE(SUM(CASE WHEN is_strict = 1 THEN 0 ELSE 1 END), 0)
            FROM questions
            WHERE theme_id = ?
            """,
            (theme_id,),
        )
        counts_row = cursor.fetchone()
        strict_count = int(counts_row[0] or 0)
        non_strict_count = int(counts_row[1] or 0)
        cursor.execute(
            """
            SELECT uqs.knowledge_level, COUNT(*)
            FROM user_question_stats uqs
            JOIN questions q ON q.id = uqs.question_id
            WHERE q.theme_id = ? AND q.is_strict = 1 AND uqs.user_id = ?
            GROUP BY uqs.knowledge_level
            """,
            (theme_id, user_id),
        )
    fold_levels(distribution, cursor.fetchall())
    apply_backfill(distribution, strict_count)

    return {
        "themeId": theme["id"],
        "title": theme["title"],
        "isLanguageTopic": theme["is_language_topic"],
        "totalItems": strict_count + non_strict_count,
        "questionsCounts": {"strict": strict_count, "nonStrict": non_strict_count},
        "knowledgeDistribution": distribution_payload(distribution),
    }
