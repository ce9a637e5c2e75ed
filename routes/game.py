from typing import List

from fastapi import APIRouter, Depends

from config import get_config_value
from db.database import get_db
from models.game import GradeRequest, GradeResponse, PlayQuestion, PoolRequest, SessionResultCreate
from utils.auth import require_user
from utils.grading import answer_similarity, grade_answer
from utils.pool import build_session_pool, load_theme_contents
from utils.session_results import record_session_result

router = APIRouter()


@router.post("/pool", response_model=List[PlayQuestion])
async def session_pool(request: PoolRequest, user_id: int = Depends(require_user), conn = Depends(get_db)):
    """Draw a shuffled set of questions from the selected themes."""
    count = request.count
    if count is None:
        count = get_config_value("game", "default_question_count", 10)
    themes = load_theme_contents(conn, user_id, request.theme_ids)
    return build_session_pool(
        themes,
        request.mode,
        count,
        include_non_strict=request.include_non_strict,
        max_distractors=get_config_value("game", "max_distractors", 3),
    )


@router.post("/grade", response_model=GradeResponse)
async def grade(request: GradeRequest):
    is_correct = grade_answer(request.question, request.user_answer)
    similarity = None
    if request.question.question_type.value == "input" and is_correct is False:
        similarity = answer_similarity(request.question.answer, request.user_answer)
    return GradeResponse(is_correct=is_correct, similarity=similarity)


@router.post("/results")
async def submit_results(
    payload: SessionResultCreate,
    user_id: int = Depends(require_user),
    conn = Depends(get_db),
):
    """Store a finished session and update the player's knowledge ledger."""
    return record_session_result(conn, user_id, payload)
