"""Assembly of the question pool for a play session.

Stored questions come from classic themes; language themes contribute
questions synthesized from their vocabulary entries. Everything here except
``load_theme_contents`` is pure: randomness comes from an injectable
``random.Random``.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from models.game import PlayQuestion
from utils.content import list_entries, list_questions, require_theme_access
from utils.errors import ValidationError

DEFAULT_MAX_DISTRACTORS = 3


@dataclass(frozen=True)
class ThemeContent:
    id: int
    title: str
    is_language_topic: bool
    questions: List[Dict] = field(default_factory=list)
    entries: List[Dict] = field(default_factory=list)


def load_theme_contents(conn, user_id: int, theme_ids: Iterable[int]) -> List[ThemeContent]:
    """Fetch the selected themes with their content, in request order, without duplicates."""
    contents: List[ThemeContent] = []
    seen = set()
    for theme_id in theme_ids:
        if theme_id in seen:
            continue
        seen.add(theme_id)
        theme = require_theme_access(conn, user_id, theme_id)
        if theme["is_language_topic"]:
            contents.append(
                ThemeContent(
                    id=theme["id"],
                    title=theme["title"],
                    is_language_topic=True,
                    entries=list_entries(conn, theme_id),
                )
            )
        else:
            contents.append(
                ThemeContent(
                    id=theme["id"],
                    title=theme["title"],
                    is_language_topic=False,
                    questions=list_questions(conn, theme_id),
                )
            )
    return contents


def is_valid_entry(entry: Dict) -> bool:
    return bool((entry.get("word") or "").strip()) and bool((entry.get("translation") or "").strip())


def stored_question(question: Dict) -> PlayQuestion:
    return PlayQuestion(
        id=f"q-{question['id']}",
        theme_id=question.get("theme_id"),
        question_text=question["question_text"],
        question_type=question["question_type"],
        is_strict=bool(question.get("is_strict")),
        options=list(question["options"]) if question.get("options") else None,
        answer=question.get("answer"),
        correct_options=list(question["correct_options"]) if question.get("correct_options") else None,
        question_hint=question.get("question_hint"),
        question_id=question["id"],
    )


def entry_input_question(entry: Dict, reverse: bool = False) -> PlayQuestion:
    word = entry["word"].strip()
    translation = entry["translation"].strip()
    return PlayQuestion(
        id=f"lang-{entry['id']}-{'reverse' if reverse else 'input'}",
        theme_id=entry.get("theme_id"),
        question_text=translation if reverse else word,
        question_type="input",
        is_strict=True,
        answer=word if reverse else translation,
        question_hint=entry.get("description"),
        language_entry_id=entry["id"],
    )


def entry_choice_question(
    entry: Dict,
    batch: Sequence[Dict],
    rng: random.Random,
    max_distractors: int = DEFAULT_MAX_DISTRACTORS,
) -> Optional[PlayQuestion]:
    """Radiobutton asking for the word behind a translation, with words from the batch as distractors.

    Returns None when the batch offers no distinct word to use as a distractor.
    """
    word = entry["word"].strip()
    candidates: List[str] = []
    for other in batch:
        other_word = other["word"].strip()
        if other["id"] == entry["id"] or other_word == word or other_word in candidates:
            continue
        candidates.append(other_word)
    if not candidates:
        return None
    distractors = rng.sample(candidates, min(max_distractors, len(candidates)))
    options = [word] + distractors
    rng.shuffle(options)
    return PlayQuestion(
        id=f"lang-{entry['id']}-choice",
        theme_id=entry.get("theme_id"),
        question_text=entry["translation"].strip(),
        question_type="radiobutton",
        is_strict=True,
        options=options,
        correct_options=[word],
        question_hint=entry.get("description"),
        language_entry_id=entry["id"],
    )


def build_classic_pool(themes: Sequence[ThemeContent], include_non_strict: bool = True) -> List[PlayQuestion]:
    pool: List[PlayQuestion] = []
    for theme in themes:
        if theme.is_language_topic:
            pool.extend(entry_input_question(entry) for entry in theme.entries if is_valid_entry(entry))
            continue
        for question in theme.questions:
            if not include_non_strict and not question.get("is_strict"):
                continue
            pool.append(stored_question(question))
    return pool


def build_language_pool(
    entries: Sequence[Dict],
    rng: random.Random,
    max_distractors: int = DEFAULT_MAX_DISTRACTORS,
) -> List[PlayQuestion]:
    valid = [entry for entry in entries if is_valid_entry(entry)]
    pool: List[PlayQuestion] = []
    for entry in valid:
        pool.append(entry_input_question(entry))
        choice = entry_choice_question(entry, valid, rng, max_distractors) if len(valid) >= 2 else None
        if choice is None:
            # No distinct distractor: ask the other way round instead
            choice = entry_input_question(entry, reverse=True)
        pool.append(choice)
    return pool


def shuffle_options(question: PlayQuestion, rng: random.Random) -> PlayQuestion:
    """Copy of the question with its options in a random order; correct options are untouched."""
    if not question.options:
        return question
    options = list(question.options)
    rng.shuffle(options)
    return question.model_copy(update={"options": options})


def draw_sample(pool: Sequence[PlayQuestion], count: int, rng: random.Random) -> List[PlayQuestion]:
    if count < 1:
        raise ValidationError("Question count must be at least 1")
    return rng.sample(list(pool), min(count, len(pool)))


def build_session_pool(
    themes: Sequence[ThemeContent],
    mode: str,
    count: int,
    include_non_strict: bool = True,
    rng: Optional[random.Random] = None,
    max_distractors: int = DEFAULT_MAX_DISTRACTORS,
) -> List[PlayQuestion]:
    """Build the pool for ``mode`` and draw up to ``count`` questions from it."""
    rng = rng or random.Random()
    if not themes:
        raise ValidationError("Select at least one theme")
    if mode == "language":
        if not all(theme.is_language_topic for theme in themes):
            raise ValidationError("Language mode requires every selected theme to be a language topic")
        entries = [entry for theme in themes for entry in theme.entries]
        pool = build_language_pool(entries, rng, max_distractors)
    elif mode == "classic":
        pool = build_classic_pool(themes, include_non_strict)
    else:
        raise ValidationError("Mode must be classic or language")
    return [shuffle_options(question, rng) for question in draw_sample(pool, count, rng)]
