from pydantic import BaseModel, Field
from typing import Optional


class KnowledgeDistribution(BaseModel):
    dont_know: int = Field(0, alias="dontKnow")
    know: int = 0
    well_know: int = Field(0, alias="wellKnow")
    perfectly_know: int = Field(0, alias="perfectlyKnow")

    class Config:
        populate_by_name = True


class QuestionsCounts(BaseModel):
    strict: int = 0
    non_strict: int = Field(0, alias="nonStrict")

    class Config:
        populate_by_name = True


class GlobalStats(BaseModel):
    total_users: int = Field(alias="totalUsers")
    total_themes: int = Field(alias="totalThemes")
    total_questions: int = Field(alias="totalQuestions")
    total_games_played: int = Field(alias="totalGamesPlayed")
    total_questions_answered: int = Field(alias="totalQuestionsAnswered")
    knowledge_distribution: KnowledgeDistribution = Field(alias="knowledgeDistribution")

    class Config:
        populate_by_name = True


class ProfileStats(BaseModel):
    total_games: int = Field(alias="totalGames")
    total_questions_answered: int = Field(alias="totalQuestionsAnswered")
    best_correct_in_row: int = Field(alias="bestCorrectInRow")
    current_correct_in_row: int = Field(0, alias="currentCorrectInRow")
    questions_counts: QuestionsCounts = Field(alias="questionsCounts")
    knowledge_distribution: KnowledgeDistribution = Field(alias="knowledgeDistribution")

    class Config:
        populate_by_name = True


class ThemeStats(BaseModel):
    theme_id: int = Field(alias="themeId")
    title: Optional[str] = None
    is_language_topic: bool = Field(alias="isLanguageTopic")
    total_items: int = Field(alias="totalItems")
    questions_counts: QuestionsCounts = Field(alias="questionsCounts")
    knowledge_distribution: KnowledgeDistribution = Field(alias="knowledgeDistribution")

    class Config:
        populate_by_name = True
