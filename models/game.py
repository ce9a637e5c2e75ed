from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Literal, Optional, Union

from .question import QuestionType

UserAnswer = Union[str, List[str], None]


class PlayQuestion(BaseModel):
    """A question instance as presented in a play session.

    Stored questions keep their database id in ``question_id``; questions
    synthesized from vocabulary carry ``language_entry_id`` instead.
    """
    id: str
    theme_id: Optional[int] = None
    question_text: str
    question_type: QuestionType
    is_strict: bool = False
    options: Optional[List[str]] = None
    answer: Optional[str] = None
    correct_options: Optional[List[str]] = None
    question_hint: Optional[str] = None
    question_id: Optional[int] = None
    language_entry_id: Optional[int] = None


class PoolRequest(BaseModel):
    theme_ids: List[int] = Field(alias="themeIds", min_length=1)
    mode: Literal["classic", "language"] = "classic"
    count: Optional[int] = None
    include_non_strict: bool = Field(True, alias="includeNonStrict")

    class Config:
        populate_by_name = True


class GradeRequest(BaseModel):
    question: PlayQuestion
    user_answer: UserAnswer = Field(None, alias="userAnswer")

    class Config:
        populate_by_name = True


class GradeResponse(BaseModel):
    is_correct: Optional[bool] = Field(alias="isCorrect")
    similarity: Optional[float] = None

    class Config:
        populate_by_name = True


class QuestionResult(BaseModel):
    question_id: Optional[int] = Field(None, alias="questionId")
    is_correct: bool = Field(alias="isCorrect")

    class Config:
        populate_by_name = True


class LanguageEntryResult(BaseModel):
    entry_id: int = Field(alias="languageEntryId")
    is_correct: bool = Field(alias="isCorrect")

    class Config:
        populate_by_name = True


class SessionResultCreate(BaseModel):
    questions_answered: int = Field(0, alias="questionsAnswered", ge=0)
    correct_answers: int = Field(0, alias="correctAnswers", ge=0)
    max_correct_in_row: int = Field(0, alias="maxCorrectInRow", ge=0)
    per_question: List[QuestionResult] = Field(default_factory=list, alias="perQuestion")
    language_entry_results: List[LanguageEntryResult] = Field(
        default_factory=list, alias="languageEntryResults"
    )

    class Config:
        populate_by_name = True

    @field_validator("per_question", "language_entry_results", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class AnswerRecord(BaseModel):
    answer: UserAnswer = None
    is_correct: Optional[bool] = Field(None, alias="isCorrect")

    class Config:
        populate_by_name = True


class GameState(BaseModel):
    """Serializable client-side session state (index and answers by question id)."""
    current_index: int = Field(0, alias="currentIndex", ge=0)
    answers: Dict[str, AnswerRecord] = Field(default_factory=dict)

    class Config:
        populate_by_name = True
