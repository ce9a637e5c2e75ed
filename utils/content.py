from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from models.language_entry import LanguageEntryCreate, LanguageEntryUpdate
from models.question import QuestionCreate, QuestionUpdate
from models.theme import ThemeCreate, ThemeUpdate
from utils.errors import NotFoundError, PermissionDeniedError, ValidationError

CHOICE_TYPES = ("select", "radiobutton")


def parse_json_list(value: Any) -> Optional[List[str]]:
    """Decode a JSON array column; malformed values read as None."""
    if value is None:
        return None
    if isinstance(value, list):
        return value
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, list) else None


def _dump_json_list(value: Optional[List[str]]) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def row_to_theme(row) -> Dict:
    theme = dict(row)
    theme["is_language_topic"] = bool(theme.get("is_language_topic"))
    return theme


def row_to_question(row) -> Dict:
    question = dict(row)
    question["is_strict"] = bool(question.get("is_strict"))
    question["options"] = parse_json_list(question.get("options"))
    question["correct_options"] = parse_json_list(question.get("correct_options"))
    return question


def row_to_entry(row) -> Dict:
    return dict(row)


# Themes

THEME_COLUMNS = "t.id, t.user_id, t.title, t.description, t.difficulty, t.is_language_topic, t.created_at"


def get_theme(conn, theme_id: int) -> Optional[Dict]:
    cursor = conn.cursor()
    cursor.execute(
        f"""
        SELECT {THEME_COLUMNS},
            CASE WHEN t.is_language_topic
                THEN (SELECT COUNT(*) FROM language_entries le WHERE le.theme_id = t.id)
                ELSE (SELECT COUNT(*) FROM questions q WHERE q.theme_id = t.id)
            END AS questions
        FROM themes t
        WHERE t.id = ?
        """,
        (theme_id,),
    )
    row = cursor.fetchone()
    return row_to_theme(row) if row else None


def get_owned_theme(conn, user_id: int, theme_id: int) -> Dict:
    """Theme owned by the user; absent and foreign themes both read as not found."""
    theme = get_theme(conn, theme_id)
    if not theme or theme["user_id"] != user_id:
        raise NotFoundError("Theme not found")
    return theme


def require_theme_access(conn, user_id: int, theme_id: int) -> Dict:
    """Theme owned by the user; 404 when absent, 403 when owned by someone else."""
    theme = get_theme(conn, theme_id)
    if not theme:
        raise NotFoundError("Theme not found")
    if theme["user_id"] != user_id:
        raise PermissionDeniedError("Theme belongs to another user")
    return theme


def list_themes(conn, user_id: int) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute(
        f"""
        SELECT {THEME_COLUMNS},
            CASE WHEN t.is_language_topic
                THEN (SELECT COUNT(*) FROM language_entries le WHERE le.theme_id = t.id)
                ELSE (SELECT COUNT(*) FROM questions q WHERE q.theme_id = t.id)
            END AS questions
        FROM themes t
        WHERE t.user_id = ?
        ORDER BY t.created_at, t.id
        """,
        (user_id,),
    )
    return [row_to_theme(row) for row in cursor.fetchall()]


def create_theme(conn, user_id: int, data: ThemeCreate) -> Dict:
    title = data.title.strip()
    if not title:
        raise ValidationError("Title is required")
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO themes (user_id, title, description, difficulty, is_language_topic)
        VALUES (?, ?, ?, ?, ?)
        """,
        (user_id, title, data.description.strip(), data.difficulty.value, int(data.is_language_topic)),
    )
    theme_id = cursor.lastrowid
    conn.commit()
    return get_theme(conn, theme_id)


def update_theme(conn, user_id: int, theme_id: int, data: ThemeUpdate) -> Dict:
    theme = get_owned_theme(conn, user_id, theme_id)
    updates: List[str] = []
    values: List[Any] = []
    if data.title is not None:
        if not data.title.strip():
            raise ValidationError("Title is required")
        updates.append("title = ?")
        values.append(data.title.strip())
    if data.description is not None:
        updates.append("description = ?")
        values.append(data.description.strip())
    if data.difficulty is not None:
        updates.append("difficulty = ?")
        values.append(data.difficulty.value)
    if data.is_language_topic is not None and data.is_language_topic != theme["is_language_topic"]:
        raise ValidationError("Theme kind cannot be changed after creation")
    if not updates:
        raise ValidationError("No fields to update")
    values.extend([theme_id, user_id])
    cursor = conn.cursor()
    cursor.execute(
        f"UPDATE themes SET {', '.join(updates)} WHERE id = ? AND user_id = ?",
        values,
    )
    conn.commit()
    return get_theme(conn, theme_id)


def delete_theme(conn, user_id: int, theme_id: int) -> None:
    get_owned_theme(conn, user_id, theme_id)
    cursor = conn.cursor()
    # Questions, entries and their ledger rows go with the theme
    cursor.execute("DELETE FROM themes WHERE id = ? AND user_id = ?", (theme_id, user_id))
    conn.commit()


# Questions

def validate_question_fields(
    question_text: Optional[str],
    question_type: str,
    options: Optional[List[str]],
    answer: Optional[str],
    correct_options: Optional[List[str]],
) -> Tuple[str, Optional[List[str]], Optional[str], Optional[List[str]]]:
    """Check a question's shape and return (text, options, answer, correct_options) cleaned up."""
    text = (question_text or "").strip()
    if not text:
        raise ValidationError("Question text is required")
    if question_type in CHOICE_TYPES:
        cleaned = [option.strip() for option in (options or []) if option and option.strip()]
        if not cleaned:
            raise ValidationError("Options are required for select and radiobutton types")
        chosen = [option.strip() for option in (correct_options or []) if option and option.strip()]
        missing = [option for option in chosen if option not in cleaned]
        if missing:
            raise ValidationError("Correct options must be chosen from the options list")
        if question_type == "radiobutton" and len(chosen) > 1:
            raise ValidationError("Radiobutton questions allow a single correct option")
        return text, cleaned, None, chosen or None
    if not answer or not answer.strip():
        raise ValidationError("Answer is required for input type questions")
    return text, None, answer.strip(), None


def _require_classic_theme(conn, user_id: int, theme_id: int) -> Dict:
    theme = get_owned_theme(conn, user_id, theme_id)
    if theme["is_language_topic"]:
        raise ValidationError("Language topics hold vocabulary entries, not questions")
    return theme


def get_question(conn, theme_id: int, question_id: int) -> Dict:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM questions WHERE id = ? AND theme_id = ?",
        (question_id, theme_id),
    )
    row = cursor.fetchone()
    if not row:
        raise NotFoundError("Question not found")
    return row_to_question(row)


def list_questions(conn, theme_id: int) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM questions WHERE theme_id = ? ORDER BY id", (theme_id,))
    return [row_to_question(row) for row in cursor.fetchall()]


def create_question(conn, user_id: int, theme_id: int, data: QuestionCreate) -> Dict:
    _require_classic_theme(conn, user_id, theme_id)
    text, options, answer, correct_options = validate_question_fields(
        data.question_text, data.question_type.value, data.options, data.answer, data.correct_options
    )
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO questions (
            theme_id, question_text, question_type, is_strict, options, answer, correct_options, question_hint
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            theme_id,
            text,
            data.question_type.value,
            int(data.is_strict),
            _dump_json_list(options),
            answer,
            _dump_json_list(correct_options),
            (data.question_hint or "").strip() or None,
        ),
    )
    question_id = cursor.lastrowid
    conn.commit()
    return get_question(conn, theme_id, question_id)


def update_question(conn, user_id: int, theme_id: int, question_id: int, data: QuestionUpdate) -> Dict:
    _require_classic_theme(conn, user_id, theme_id)
    existing = get_question(conn, theme_id, question_id)
    provided = data.model_dump(exclude_unset=True)
    if not provided:
        raise ValidationError("No fields to update")
    merged = {**existing, **provided}
    question_type = getattr(merged["question_type"], "value", merged["question_type"])
    text, options, answer, correct_options = validate_question_fields(
        merged["question_text"], question_type, merged["options"], merged["answer"], merged["correct_options"]
    )
    hint = merged.get("question_hint")
    cursor = conn.cursor()
    cursor.execute(
        """
        UPDATE questions
        SET question_text = ?, question_type = ?, is_strict = ?, options = ?,
            answer = ?, correct_options = ?, question_hint = ?
        WHERE id = ? AND theme_id = ?
        """,
        (
            text,
            question_type,
            int(bool(merged["is_strict"])),
            _dump_json_list(options),
            answer,
            _dump_json_list(correct_options),
            (hint or "").strip() or None,
            question_id,
            theme_id,
        ),
    )
    conn.commit()
    return get_question(conn, theme_id, question_id)


def delete_question(conn, user_id: int, theme_id: int, question_id: int) -> None:
    _require_classic_theme(conn, user_id, theme_id)
    get_question(conn, theme_id, question_id)
    cursor = conn.cursor()
    cursor.execute("DELETE FROM questions WHERE id = ? AND theme_id = ?", (question_id, theme_id))
    conn.commit()


# Language entries

def validate_entry_fields(
    word: Optional[str], translation: Optional[str], description: Optional[str]
) -> Tuple[str, str, Optional[str]]:
    word_clean = (word or "").strip()
    translation_clean = (translation or "").strip()
    if not word_clean or not translation_clean:
        raise ValidationError("Word and translation are required")
    description_clean = (description or "").strip() or None
    return word_clean, translation_clean, description_clean


def _require_language_theme(conn, user_id: int, theme_id: int) -> Dict:
    theme = get_owned_theme(conn, user_id, theme_id)
    if not theme["is_language_topic"]:
        raise ValidationError("Vocabulary entries can only be added to language topics")
    return theme


def get_entry(conn, theme_id: int, entry_id: int) -> Dict:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM language_entries WHERE id = ? AND theme_id = ?",
        (entry_id, theme_id),
    )
    row = cursor.fetchone()
    if not row:
        raise NotFoundError("Language entry not found")
    return row_to_entry(row)


def list_entries(conn, theme_id: int) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM language_entries WHERE theme_id = ? ORDER BY id", (theme_id,))
    return [row_to_entry(row) for row in cursor.fetchall()]


def create_entry(conn, user_id: int, theme_id: int, data: LanguageEntryCreate) -> Dict:
    _require_language_theme(conn, user_id, theme_id)
    word, translation, description = validate_entry_fields(data.word, data.translation, data.description)
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO language_entries (theme_id, word, description, translation) VALUES (?, ?, ?, ?)",
        (theme_id, word, description, translation),
    )
    entry_id = cursor.lastrowid
    conn.commit()
    return get_entry(conn, theme_id, entry_id)


def update_entry(conn, user_id: int, theme_id: int, entry_id: int, data: LanguageEntryUpdate) -> Dict:
    _require_language_theme(conn, user_id, theme_id)
    existing = get_entry(conn, theme_id, entry_id)
    provided = data.model_dump(exclude_unset=True)
    if not provided:
        raise ValidationError("No fields to update")
    merged = {**existing, **provided}
    word, translation, description = validate_entry_fields(
        merged["word"], merged["translation"], merged["description"]
    )
    cursor = conn.cursor()
    cursor.execute(
        """
        UPDATE language_entries
        SET word = ?, translation = ?, description = ?
        WHERE id = ? AND theme_id = ?
        """,
        (word, translation, description, entry_id, theme_id),
    )
    conn.commit()
    return get_entry(conn, theme_id, entry_id)


def delete_entry(conn, user_id: int, theme_id: int, entry_id: int) -> None:
    _require_language_theme(conn, user_id, theme_id)
    get_entry(conn, theme_id, entry_id)
    cursor = conn.cursor()
    cursor.execute("DELETE FROM language_entries WHERE id = ? AND theme_id = ?", (entry_id, theme_id))
    conn.commit()
