from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from Levenshtein import ratio as lev_ratio

from models.game import (
    AnswerRecord,
    GameState,
    LanguageEntryResult,
    PlayQuestion,
    QuestionResult,
    SessionResultCreate,
    UserAnswer,
)


def normalize_answer(value: Optional[str]) -> str:
    """Trim, lowercase and fold the Cyrillic "ё" into "е".

    No other diacritics are folded: "ö" stays "ö".
    """
    if value is None:
        return ""
    return str(value).strip().lower().replace("ё", "е")


def _type_value(question: PlayQuestion) -> str:
    qtype = question.question_type
    return getattr(qtype, "value", qtype)


def _single_answer(user_answer: UserAnswer) -> Optional[str]:
    if isinstance(user_answer, list):
        return user_answer[0] if len(user_answer) == 1 else None
    return user_answer


def _selected_options(user_answer: UserAnswer) -> List[str]:
    if user_answer is None:
        return []
    if isinstance(user_answer, str):
        return [user_answer] if user_answer.strip() else []
    return [item for item in user_answer if item is not None]


def grade_answer(question: PlayQuestion, user_answer: UserAnswer) -> Optional[bool]:
    """Grade one answer. None means correctness is undefined for the question."""
    qtype = _type_value(question)
    if qtype == "input":
        expected = normalize_answer(question.answer)
        if not expected:
            return None
        return normalize_answer(_single_answer(user_answer)) == expected
    correct = question.correct_options or []
    if not correct:
        return None
    if qtype == "radiobutton":
        return normalize_answer(_single_answer(user_answer)) == normalize_answer(correct[0])
    selected = _selected_options(user_answer)
    if not selected:
        return False
    selected_set = sorted({normalize_answer(option) for option in selected})
    correct_set = sorted({normalize_answer(option) for option in correct})
    return selected_set == correct_set


def answer_similarity(expected: Optional[str], actual: UserAnswer) -> Optional[float]:
    """Levenshtein ratio of normalized strings, used only as a near-miss hint."""
    expected_clean = normalize_answer(expected)
    if not expected_clean:
        return None
    actual_clean = normalize_answer(_single_answer(actual))
    return round(lev_ratio(expected_clean, actual_clean), 3)


def compute_streaks(results: Iterable[Optional[bool]]) -> Tuple[int, int]:
    """Return (max_correct_in_row, current_correct_in_row); None counts as a miss."""
    running = 0
    best = 0
    for result in results:
        if result is True:
            running += 1
            best = max(best, running)
        else:
            running = 0
    return best, running


def _has_answer(user_answer: UserAnswer) -> bool:
    if user_answer is None:
        return False
    if isinstance(user_answer, str):
        return bool(user_answer.strip())
    return len(user_answer) > 0


def submit_answer(state: GameState, question: PlayQuestion, user_answer: UserAnswer) -> GameState:
    """Grade an answer and return the next state; the given state is left as is."""
    answers = dict(state.answers)
    answers[question.id] = AnswerRecord(answer=user_answer, is_correct=grade_answer(question, user_answer))
    return state.model_copy(
        update={"answers": answers, "current_index": state.current_index + 1}
    )


def session_outcomes(questions: List[PlayQuestion], state: GameState) -> List[Optional[bool]]:
    """Outcome per question in presentation order; unanswered questions are misses."""
    outcomes: List[Optional[bool]] = []
    for question in questions:
        record = state.answers.get(question.id)
        if record is None or not _has_answer(record.answer):
            outcomes.append(False)
        else:
            outcomes.append(record.is_correct)
    return outcomes


def build_session_result(questions: List[PlayQuestion], state: GameState) -> SessionResultCreate:
    """Fold a finished session into the payload accepted by the result recorder."""
    outcomes = session_outcomes(questions, state)
    # Answers whose correctness is undefined do not take part in streaks
    max_in_row, _ = compute_streaks(outcome for outcome in outcomes if outcome is not None)
    per_question: List[QuestionResult] = []
    entry_results: List[LanguageEntryResult] = []
    for question, outcome in zip(questions, outcomes):
        if outcome is None or not question.is_strict:
            continue
        if question.question_id is not None:
            per_question.append(QuestionResult(question_id=question.question_id, is_correct=outcome))
        if question.language_entry_id is not None:
            entry_results.append(
                LanguageEntryResult(entry_id=question.language_entry_id, is_correct=outcome)
            )
    return SessionResultCreate(
        questions_answered=len(questions),
        correct_answers=sum(1 for outcome in outcomes if outcome is True),
        max_correct_in_row=max_in_row,
        per_question=per_question,
        language_entry_results=entry_results,
    )
