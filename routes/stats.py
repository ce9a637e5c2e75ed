from fastapi import APIRouter, Depends

from db.database import get_db
from models.stats import GlobalStats, ProfileStats, ThemeStats
from utils.auth import require_user
from utils.stats import get_global_stats, get_profile_stats, get_theme_stats

router = APIRouter()


@router.get("/global", response_model=GlobalStats)
async def global_stats(conn = Depends(get_db)):
    """Site-wide totals and knowledge distribution; no sign-in needed."""
    return get_global_stats(conn)


@router.get("/profile", response_model=ProfileStats)
async def profile_stats(user_id: int = Depends(require_user), conn = Depends(get_db)):
    return get_profile_stats(conn, user_id)


@router.get("/themes/{theme_id}", response_model=ThemeStats)
async def theme_stats(theme_id: int, user_id: int = Depends(require_user), conn = Depends(get_db)):
    return get_theme_stats(conn, user_id, theme_id)
