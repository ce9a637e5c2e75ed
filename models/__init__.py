from .user import User, UserCredentials
from .theme import Theme, ThemeCreate, ThemeUpdate, Difficulty
from .question import Question, QuestionCreate, QuestionUpdate, QuestionType
from .language_entry import LanguageEntry, LanguageEntryCreate, LanguageEntryUpdate
from .game import (
    PlayQuestion,
    PoolRequest,
    GradeRequest,
    GradeResponse,
    QuestionResult,
    LanguageEntryResult,
    SessionResultCreate,
    AnswerRecord,
    GameState,
)
from .stats import KnowledgeDistribution, QuestionsCounts, GlobalStats, ProfileStats, ThemeStats

__all__ = [
    'User', 'UserCredentials',
    'Theme', 'ThemeCreate', 'ThemeUpdate', 'Difficulty',
    'Question', 'QuestionCreate', 'QuestionUpdate', 'QuestionType',
    'LanguageEntry', 'LanguageEntryCreate', 'LanguageEntryUpdate',
    'PlayQuestion', 'PoolRequest', 'GradeRequest', 'GradeResponse',
    'QuestionResult', 'LanguageEntryResult', 'SessionResultCreate', 'AnswerRecord', 'GameState',
    'KnowledgeDistribution', 'QuestionsCounts', 'GlobalStats', 'ProfileStats', 'ThemeStats',
]
