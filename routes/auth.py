from fastapi import APIRouter, Depends, HTTPException, Response, status

from config import get_config_value, get_secret_key
from db.database import get_db
from models.user import User, UserCredentials
from utils.auth import (
    SESSION_COOKIE_NAME,
    authenticate_user,
    register_user,
    create_session_cookie,
    get_session_days,
    require_user,
)

router = APIRouter()


def _set_session_cookie(response: Response, user_id: int) -> None:
    days = get_session_days()
    response.set_cookie(
        SESSION_COOKIE_NAME,
        create_session_cookie(user_id, get_secret_key(), days),
        max_age=days * 24 * 60 * 60,
        httponly=True,
        secure=get_config_value("auth", "cookie_secure", False),
        samesite="lax",
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(credentials: UserCredentials, response: Response, conn = Depends(get_db)):
    """Create an account and sign it in."""
    user_id = register_user(conn, credentials.name, credentials.password)
    _set_session_cookie(response, user_id)
    return {"message": "User registered successfully"}


@router.post("/login")
async def login(credentials: UserCredentials, response: Response, conn = Depends(get_db)):
    user_id = authenticate_user(conn, credentials.name, credentials.password)
    _set_session_cookie(response, user_id)
    return {"message": "Login successful"}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Logout successful"}


@router.get("/profile", response_model=User)
async def profile(user_id: int = Depends(require_user), conn = Depends(get_db)):
    cursor = conn.cursor()
    cursor.execute("SELECT id, name FROM users WHERE id = ?", (user_id,))
    row = cursor.fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return dict(row)
