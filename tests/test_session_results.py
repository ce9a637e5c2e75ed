import sqlite3

import pytest

import utils.session_results as session_results
from conftest import add_entry, add_question, add_theme, add_user
from models.game import SessionResultCreate
from utils.ledger import get_entry_streak, get_question_level
from utils.session_results import record_session_result
from utils.stats import get_theme_stats


def _games(conn, user_id):
    return conn.execute(
        "SELECT questions_answered, correct_answers, max_correct_in_row FROM user_games WHERE user_id = ?",
        (user_id,),
    ).fetchall()


def test_capitals_session_updates_ledger_and_theme_stats(conn):
    user_id = add_user(conn)
    theme_id = add_theme(conn, user_id, title="Capitals")
    q1 = add_question(conn, theme_id, text="Capital of France?", answer="Paris")
    q2 = add_question(conn, theme_id, text="Capital of Peru?", answer="Lima")
    payload = SessionResultCreate.model_validate(
        {
            "questionsAnswered": 2,
            "correctAnswers": 1,
            "maxCorrectInRow": 1,
            "perQuestion": [
                {"questionId": q1, "isCorrect": True},
                {"questionId": q2, "isCorrect": False},
            ],
        }
    )

    assert record_session_result(conn, user_id, payload) == {"accepted": True}

    assert get_question_level(conn, user_id, q1) == 1
    assert get_question_level(conn, user_id, q2) == 0
    stats = get_theme_stats(conn, user_id, theme_id)
    assert stats["knowledgeDistribution"] == {"dontKnow": 1, "know": 1, "wellKnow": 0, "perfectlyKnow": 0}
    assert [tuple(row) for row in _games(conn, user_id)] == [(2, 1, 1)]


def test_empty_session_still_counts_as_played(conn):
    user_id = add_user(conn)
    payload = SessionResultCreate.model_validate(
        {"questionsAnswered": 5, "correctAnswers": 0, "maxCorrectInRow": 0,
         "perQuestion": None, "languageEntryResults": None}
    )

    record_session_result(conn, user_id, payload)

    assert len(_games(conn, user_id)) == 1


def test_null_question_ids_and_missing_questions_are_skipped(conn):
    user_id = add_user(conn)
    theme_id = add_theme(conn, user_id)
    question_id = add_question(conn, theme_id)
    payload = SessionResultCreate.model_validate(
        {
            "questionsAnswered": 3,
            "correctAnswers": 3,
            "maxCorrectInRow": 3,
            "perQuestion": [
                {"questionId": None, "isCorrect": True},
                {"questionId": 4242, "isCorrect": True},
                {"questionId": question_id, "isCorrect": True},
            ],
        }
    )

    record_session_result(conn, user_id, payload)

    assert get_question_level(conn, user_id, question_id) == 1
    count = conn.execute("SELECT COUNT(*) FROM user_question_stats").fetchone()[0]
    assert count == 1


def test_language_results_only_touch_owned_entries(conn):
    owner_id = add_user(conn, "owner")
    player_id = add_user(conn, "player")
    own_theme = add_theme(conn, player_id, title="Mine", is_language_topic=True)
    foreign_theme = add_theme(conn, owner_id, title="Theirs", is_language_topic=True)
    own_entry = add_entry(conn, own_theme, word="dog", translation="собака")
    foreign_entry = add_entry(conn, foreign_theme)
    payload = SessionResultCreate.model_validate(
        {
            "questionsAnswered": 2,
            "correctAnswers": 2,
            "maxCorrectInRow": 2,
            "languageEntryResults": [
                {"languageEntryId": foreign_entry, "isCorrect": True},
                {"languageEntryId": own_entry, "isCorrect": True},
            ],
        }
    )

    assert record_session_result(conn, player_id, payload) == {"accepted": True}

    assert get_entry_streak(conn, player_id, own_entry) == 1
    assert get_entry_streak(conn, player_id, foreign_entry) is None


def test_vocabulary_streak_across_sessions(conn):
    user_id = add_user(conn)
    theme_id = add_theme(conn, user_id, title="Animals", is_language_topic=True)
    entry_id = add_entry(conn, theme_id, word="cat", translation="кот")

    def play(is_correct):
        payload = SessionResultCreate(
            questions_answered=1,
            correct_answers=int(is_correct),
            max_correct_in_row=int(is_correct),
            language_entry_results=[{"languageEntryId": entry_id, "isCorrect": is_correct}],
        )
        record_session_result(conn, user_id, payload)
        return get_entry_streak(conn, user_id, entry_id)

    assert [play(True) for _ in range(4)] == [1, 2, 3, 3]
    assert play(False) == 0
    assert len(_games(conn, user_id)) == 5


def test_constraint_failure_on_one_item_does_not_abort_the_batch(conn, monkeypatch):
    user_id = add_user(conn)
    theme_id = add_theme(conn, user_id)
    broken = add_question(conn, theme_id, text="Q1")
    fine = add_question(conn, theme_id, text="Q2")
    language_id = add_theme(conn, user_id, title="Animals", is_language_topic=True)
    entry_id = add_entry(conn, language_id)
    real_upsert = session_results.upsert_question_mastery

    def upsert(conn, user_id, question_id, is_correct):
        if question_id == broken:
            raise sqlite3.IntegrityError("CHECK constraint failed: knowledge_level")
        return real_upsert(conn, user_id, question_id, is_correct)

    monkeypatch.setattr(session_results, "upsert_question_mastery", upsert)
    payload = SessionResultCreate.model_validate(
        {
            "questionsAnswered": 3,
            "correctAnswers": 3,
            "maxCorrectInRow": 3,
            "perQuestion": [
                {"questionId": broken, "isCorrect": True},
                {"questionId": fine, "isCorrect": True},
            ],
            "languageEntryResults": [{"languageEntryId": entry_id, "isCorrect": True}],
        }
    )

    assert record_session_result(conn, user_id, payload) == {"accepted": True}

    assert get_question_level(conn, user_id, broken) is None
    assert get_question_level(conn, user_id, fine) == 1
    assert get_entry_streak(conn, user_id, entry_id) == 1
    assert len(_games(conn, user_id)) == 1


def test_locked_database_during_ledger_update_propagates(conn, db_env, monkeypatch):
    user_id = add_user(conn)
    theme_id = add_theme(conn, user_id)
    question_id = add_question(conn, theme_id)
    payload = SessionResultCreate.model_validate(
        {
            "questionsAnswered": 1,
            "correctAnswers": 1,
            "maxCorrectInRow": 1,
            "perQuestion": [{"questionId": question_id, "isCorrect": True}],
        }
    )
    real_insert = session_results.insert_session_summary
    blocker = sqlite3.connect(db_env / "cortex.db", timeout=0)

    def insert_then_lock(conn, user_id, payload):
        game_id = real_insert(conn, user_id, payload)
        blocker.execute("BEGIN IMMEDIATE")
        return game_id

    monkeypatch.setattr(session_results, "insert_session_summary", insert_then_lock)
    conn.execute("PRAGMA busy_timeout = 0")
    try:
        with pytest.raises(sqlite3.OperationalError):
            record_session_result(conn, user_id, payload)
    finally:
        blocker.rollback()
        blocker.close()

    assert len(_games(conn, user_id)) == 1
    assert get_question_level(conn, user_id, question_id) is None
