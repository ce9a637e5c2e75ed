from pydantic import BaseModel
from typing import List, Optional
from enum import Enum

class QuestionType(str, Enum):
    INPUT = "input"
    SELECT = "select"
    RADIOBUTTON = "radiobutton"

class QuestionBase(BaseModel):
    question_text: str
    question_type: QuestionType
    is_strict: bool = False
    options: Optional[List[str]] = None
    answer: Optional[str] = None
    correct_options: Optional[List[str]] = None
    question_hint: Optional[str] = None

class QuestionCreate(QuestionBase):
    pass

class QuestionUpdate(BaseModel):
    question_text: Optional[str] = None
    question_type: Optional[QuestionType] = None
    is_strict: Optional[bool] = None
    options: Optional[List[str]] = None
    answer: Optional[str] = None
    correct_options: Optional[List[str]] = None
    question_hint: Optional[str] = None

class Question(QuestionBase):
    id: int
    theme_id: int

    class Config:
        from_attributes = True
