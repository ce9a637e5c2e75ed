import pytest

from conftest import add_entry, add_question, add_theme, add_user
from utils.errors import NotFoundError, PermissionDeniedError
from utils.ledger import upsert_entry_streak, upsert_question_mastery
from utils.stats import (
    apply_backfill,
    distribution_payload,
    empty_distribution,
    fold_levels,
    get_global_stats,
    get_profile_stats,
    get_theme_stats,
)


def test_backfill_adds_shortfall_to_dont_know():
    distribution = fold_levels(empty_distribution(), [(1, 2), (3, 1)])

    apply_backfill(distribution, 5)

    assert distribution_payload(distribution) == {"dontKnow": 2, "know": 2, "wellKnow": 0, "perfectlyKnow": 1}


def test_backfill_is_noop_when_every_item_has_a_row():
    distribution = fold_levels(empty_distribution(), [(0, 1), (2, 3)])

    apply_backfill(distribution, 4)

    assert distribution_payload(distribution) == {"dontKnow": 1, "know": 0, "wellKnow": 3, "perfectlyKnow": 0}


def test_backfill_never_subtracts():
    distribution = fold_levels(empty_distribution(), [(2, 3)])

    apply_backfill(distribution, 1)

    assert distribution[0] == 0


def test_theme_stats_counts_untouched_questions_as_unknown(conn):
    user_id = add_user(conn)
    theme_id = add_theme(conn, user_id)
    q1 = add_question(conn, theme_id, text="Q1")
    add_question(conn, theme_id, text="Q2")
    add_question(conn, theme_id, text="Q3")
    add_question(conn, theme_id, text="Practice", is_strict=False)
    for _ in range(2):
        upsert_question_mastery(conn, user_id, q1, True)
    conn.commit()

    stats = get_theme_stats(conn, user_id, theme_id)

    assert stats["questionsCounts"] == {"strict": 3, "nonStrict": 1}
    assert stats["totalItems"] == 4
    assert stats["knowledgeDistribution"] == {"dontKnow": 2, "know": 0, "wellKnow": 1, "perfectlyKnow": 0}


def test_language_theme_stats_use_entry_streaks(conn):
    user_id = add_user(conn)
    theme_id = add_theme(conn, user_id, title="Animals", is_language_topic=True)
    cat = add_entry(conn, theme_id, word="cat", translation="кот")
    add_entry(conn, theme_id, word="dog", translation="собака")
    for _ in range(5):
        upsert_entry_streak(conn, user_id, cat, True)
    conn.commit()

    stats = get_theme_stats(conn, user_id, theme_id)

    assert stats["isLanguageTopic"] is True
    assert stats["questionsCounts"] == {"strict": 2, "nonStrict": 0}
    assert stats["knowledgeDistribution"] == {"dontKnow": 1, "know": 0, "wellKnow": 0, "perfectlyKnow": 1}


def test_theme_stats_ownership(conn):
    owner_id = add_user(conn, "owner")
    other_id = add_user(conn, "other")
    theme_id = add_theme(conn, owner_id)

    with pytest.raises(PermissionDeniedError):
        get_theme_stats(conn, other_id, theme_id)
    with pytest.raises(NotFoundError):
        get_theme_stats(conn, owner_id, 9999)


def test_profile_stats(conn):
    user_id = add_user(conn)
    classic = add_theme(conn, user_id)
    language = add_theme(conn, user_id, title="Animals", is_language_topic=True)
    strict_q = add_question(conn, classic, text="Q1")
    add_question(conn, classic, text="Practice", is_strict=False)
    entry_id = add_entry(conn, language)
    upsert_question_mastery(conn, user_id, strict_q, True)
    upsert_entry_streak(conn, user_id, entry_id, False)
    conn.executemany(
        "INSERT INTO user_games (user_id, questions_answered, correct_answers, max_correct_in_row, played_at) "
        "VALUES (?, ?, ?, ?, ?)",
        [
            (user_id, 10, 7, 5, "2026-01-01 10:00:00"),
            (user_id, 4, 2, 2, "2026-01-02 10:00:00"),
        ],
    )
    conn.commit()

    stats = get_profile_stats(conn, user_id)

    assert stats["totalGames"] == 2
    assert stats["totalQuestionsAnswered"] == 14
    assert stats["bestCorrectInRow"] == 5
    assert stats["currentCorrectInRow"] == 2
    assert stats["questionsCounts"] == {"strict": 2, "nonStrict": 1}
    assert stats["knowledgeDistribution"] == {"dontKnow": 1, "know": 1, "wellKnow": 0, "perfectlyKnow": 0}


def test_profile_stats_for_new_user(conn):
    user_id = add_user(conn)

    stats = get_profile_stats(conn, user_id)

    assert stats["totalGames"] == 0
    assert stats["bestCorrectInRow"] == 0
    assert stats["currentCorrectInRow"] == 0
    assert stats["knowledgeDistribution"] == {"dontKnow": 0, "know": 0, "wellKnow": 0, "perfectlyKnow": 0}


def test_global_stats(conn):
    ada = add_user(conn, "ada")
    bob = add_user(conn, "bob")
    classic = add_theme(conn, ada)
    language = add_theme(conn, bob, title="Animals", is_language_topic=True)
    strict_q = add_question(conn, classic, text="Q1")
    add_question(conn, classic, text="Practice", is_strict=False)
    entry_id = add_entry(conn, language)
    add_entry(conn, language, word="dog", translation="собака")
    upsert_question_mastery(conn, ada, strict_q, True)
    assert upsert_question_mastery(conn, bob, strict_q, False) is None
    upsert_entry_streak(conn, bob, entry_id, True)
    conn.execute(
        "INSERT INTO user_games (user_id, questions_answered, correct_answers, max_correct_in_row) VALUES (?, 6, 3, 2)",
        (ada,),
    )
    conn.commit()

    stats = get_global_stats(conn)

    assert stats["totalUsers"] == 2
    assert stats["totalThemes"] == 2
    assert stats["totalQuestions"] == 4
    assert stats["totalGamesPlayed"] == 1
    assert stats["totalQuestionsAnswered"] == 6
    # 2 ledger rows for 3 graded items: one backfilled
    assert stats["knowledgeDistribution"] == {"dontKnow": 1, "know": 2, "wellKnow": 0, "perfectlyKnow": 0}
