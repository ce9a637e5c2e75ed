from typing import List

from fastapi import APIRouter, Depends, status

from db.database import get_db
from models.language_entry import LanguageEntry, LanguageEntryCreate, LanguageEntryUpdate
from models.question import Question, QuestionCreate, QuestionUpdate
from models.theme import Theme, ThemeCreate, ThemeUpdate
from utils import content
from utils.auth import require_user

router = APIRouter()


@router.get("/", response_model=List[Theme])
async def list_themes(user_id: int = Depends(require_user), conn = Depends(get_db)):
    """List the signed-in user's themes with their item counts."""
    return content.list_themes(conn, user_id)


@router.post("/", response_model=Theme, status_code=status.HTTP_201_CREATED)
async def create_theme(data: ThemeCreate, user_id: int = Depends(require_user), conn = Depends(get_db)):
    return content.create_theme(conn, user_id, data)


@router.get("/{theme_id}")
async def get_theme(theme_id: int, user_id: int = Depends(require_user), conn = Depends(get_db)):
    """Theme with its questions, or its vocabulary entries for language topics."""
    theme = content.get_owned_theme(conn, user_id, theme_id)
    if theme["is_language_topic"]:
        theme["language_entries"] = content.list_entries(conn, theme_id)
        theme["language_entries_count"] = len(theme["language_entries"])
        theme["questions"] = []
    else:
        theme["questions"] = content.list_questions(conn, theme_id)
    return theme


@router.put("/{theme_id}", response_model=Theme)
async def update_theme(
    theme_id: int,
    data: ThemeUpdate,
    user_id: int = Depends(require_user),
    conn = Depends(get_db),
):
    return content.update_theme(conn, user_id, theme_id, data)


@router.delete("/{theme_id}")
async def delete_theme(theme_id: int, user_id: int = Depends(require_user), conn = Depends(get_db)):
    content.delete_theme(conn, user_id, theme_id)
    return {"message": "Theme deleted successfully"}


@router.post("/{theme_id}/questions", response_model=Question, status_code=status.HTTP_201_CREATED)
async def create_question(
    theme_id: int,
    data: QuestionCreate,
    user_id: int = Depends(require_user),
    conn = Depends(get_db),
):
    return content.create_question(conn, user_id, theme_id, data)


@router.put("/{theme_id}/questions/{question_id}", response_model=Question)
async def update_question(
    theme_id: int,
    question_id: int,
    data: QuestionUpdate,
    user_id: int = Depends(require_user),
    conn = Depends(get_db),
):
    return content.update_question(conn, user_id, theme_id, question_id, data)


@router.delete("/{theme_id}/questions/{question_id}")
async def delete_question(
    theme_id: int,
    question_id: int,
    user_id: int = Depends(require_user),
    conn = Depends(get_db),
):
    content.delete_question(conn, user_id, theme_id, question_id)
    return {"message": "Question deleted successfully"}


@router.post("/{theme_id}/entries", response_model=LanguageEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    theme_id: int,
    data: LanguageEntryCreate,
    user_id: int = Depends(require_user),
    conn = Depends(get_db),
):
    return content.create_entry(conn, user_id, theme_id, data)


@router.put("/{theme_id}/entries/{entry_id}", response_model=LanguageEntry)
async def update_entry(
    theme_id: int,
    entry_id: int,
    data: LanguageEntryUpdate,
    user_id: int = Depends(require_user),
    conn = Depends(get_db),
):
    return content.update_entry(conn, user_id, theme_id, entry_id, data)


@router.delete("/{theme_id}/entries/{entry_id}")
async def delete_entry(
    theme_id: int,
    entry_id: int,
    user_id: int = Depends(require_user),
    conn = Depends(get_db),
):
    content.delete_entry(conn, user_id, theme_id, entry_id)
    return {"message": "Language entry deleted successfully"}
