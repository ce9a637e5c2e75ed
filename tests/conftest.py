import json
from pathlib import Path

import pytest

import config
from db import database


def _write_test_config(config_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[auth]",
                "secret_key = \"test-secret\"",
                "session_days = 7",
                "",
                "[game]",
                "default_question_count = 10",
                "max_distractors = 3",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def db_env(tmp_path, monkeypatch):
    config_dir = tmp_path / ".cortex"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    _write_test_config(config_path)

    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "cortex.db")

    database.init_db()
    return config_dir


@pytest.fixture
def conn(db_env):
    with database.get_conn() as connection:
        yield connection


def add_user(conn, name="ada"):
    cursor = conn.cursor()
    cursor.execute("INSERT INTO users (name, password_hash) VALUES (?, 'x')", (name,))
    conn.commit()
    return cursor.lastrowid


def add_theme(conn, user_id, title="Capitals", is_language_topic=False):
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO themes (user_id, title, description, difficulty, is_language_topic)
        VALUES (?, ?, '', 'Easy', ?)
        """,
        (user_id, title, int(is_language_topic)),
    )
    conn.commit()
    return cursor.lastrowid


def add_question(conn, theme_id, text="Capital of France?", answer="Paris", is_strict=True,
                 question_type="input", options=None, correct_options=None):
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO questions (theme_id, question_text, question_type, is_strict, options, answer, correct_options)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            theme_id,
            text,
            question_type,
            int(is_strict),
            json.dumps(options) if options is not None else None,
            answer,
            json.dumps(correct_options) if correct_options is not None else None,
        ),
    )
    conn.commit()
    return cursor.lastrowid


def add_entry(conn, theme_id, word="cat", translation="кот", description=None):
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO language_entries (theme_id, word, description, translation) VALUES (?, ?, ?, ?)",
        (theme_id, word, description, translation),
    )
    conn.commit()
    return cursor.lastrowid
