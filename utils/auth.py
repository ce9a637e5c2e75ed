from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
import sqlite3
import time
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from config import get_secret_key, load_config
from db.database import get_db
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "accessToken"
PASSWORD_HASH_ALGO = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 200_000


def get_session_days() -> int:
    return int(load_config()["auth"]["session_days"])


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        PASSWORD_HASH_ITERATIONS,
    )
    digest = base64.urlsafe_b64encode(dk).decode("utf-8")
    return f"{PASSWORD_HASH_ALGO}${PASSWORD_HASH_ITERATIONS}${salt}${digest}"


def verify_password(password: str, stored_hash: str) -> bool:
    if not stored_hash:
        return False
    try:
        algo, iterations_str, salt, digest = stored_hash.split("$", 3)
    except ValueError:
        return False
    if algo != PASSWORD_HASH_ALGO:
        return False
    try:
        iterations = int(iterations_str)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    )
    computed = base64.urlsafe_b64encode(dk).decode("utf-8")
    return hmac.compare_digest(computed, digest)


def _sign(payload: str, secret_key: str) -> str:
    return hmac.new(secret_key.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def create_session_cookie(user_id: int, secret_key: str, duration_days: int) -> str:
    expires_at = int(time.time()) + int(duration_days) * 24 * 60 * 60
    payload = f"{int(user_id)}:{expires_at}"
    return f"{payload}:{_sign(payload, secret_key)}"


def verify_session_cookie(cookie_value: Optional[str], secret_key: str) -> Optional[int]:
    """Return the user id carried by a valid, unexpired cookie."""
    if not cookie_value or not secret_key:
        return None
    try:
        user_id_str, expires_str, signature = cookie_value.split(":", 2)
    except ValueError:
        return None
    expected = _sign(f"{user_id_str}:{expires_str}", secret_key)
    if not hmac.compare_digest(signature, expected):
        return None
    try:
        user_id = int(user_id_str)
        expires_at = int(expires_str)
    except ValueError:
        return None
    if expires_at < int(time.time()):
        return None
    return user_id


def register_user(conn, name: str, password: str) -> int:
    name = (name or "").strip()
    if not name or not password:
        raise ValidationError("Name and password required")
    cursor = conn.cursor()
    try:
        cursor.execute(
            "INSERT INTO users (name, password_hash) VALUES (?, ?)",
            (name, hash_password(password)),
        )
    except sqlite3.IntegrityError:
        raise ValidationError("User already exists")
    conn.commit()
    logger.info("Registered user %s", name)
    return cursor.lastrowid


def authenticate_user(conn, name: str, password: str) -> int:
    name = (name or "").strip()
    if not name or not password:
        raise ValidationError("Name and password required")
    cursor = conn.cursor()
    cursor.execute("SELECT id, password_hash FROM users WHERE name = ?", (name,))
    row = cursor.fetchone()
    if not row:
        raise ValidationError("User not found")
    if not verify_password(password, row["password_hash"]):
        raise ValidationError("Wrong password")
    logger.info("User %s logged in", name)
    return int(row["id"])


def get_session_user_id(request: Request) -> Optional[int]:
    return verify_session_cookie(request.cookies.get(SESSION_COOKIE_NAME), get_secret_key())


def require_user(request: Request, conn=Depends(get_db)) -> int:
    """Dependency resolving the signed-in user's id, 401 otherwise."""
    user_id = get_session_user_id(request)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized")
    cursor = conn.cursor()
    cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,))
    if not cursor.fetchone():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user_id
