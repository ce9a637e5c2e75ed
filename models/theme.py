from pydantic import BaseModel
from typing import Optional
from enum import Enum

class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

class ThemeBase(BaseModel):
    title: str
    description: str = ""
    difficulty: Difficulty

class ThemeCreate(ThemeBase):
    is_language_topic: bool = False

class ThemeUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    # Accepted only when unchanged; the content kind of a theme is fixed
    is_language_topic: Optional[bool] = None

class Theme(ThemeBase):
    id: int
    user_id: int
    is_language_topic: bool = False
    questions: int = 0
    created_at: Optional[str] = None

    class Config:
        from_attributes = True
