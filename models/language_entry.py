from pydantic import BaseModel
from typing import Optional

class LanguageEntryBase(BaseModel):
    word: str
    description: Optional[str] = None
    translation: str

class LanguageEntryCreate(LanguageEntryBase):
    pass

class LanguageEntryUpdate(BaseModel):
    word: Optional[str] = None
    description: Optional[str] = None
    translation: Optional[str] = None

class LanguageEntry(LanguageEntryBase):
    id: int
    theme_id: int

    class Config:
        from_attributes = True
