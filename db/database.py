import sqlite3
from contextlib import contextmanager
from pathlib import Path

from .schema import SCHEMA_SQL, INDEXES_SQL, SCHEMA_VERSION

CONFIG_DIR = Path.home() / ".cortex"
DB_PATH = CONFIG_DIR / "cortex.db"

def init_db():
    """Initialize the database by creating tables and indexes if they don't exist."""
    CONFIG_DIR.mkdir(exist_ok=True)
    with get_conn() as conn:
        conn.executescript(SCHEMA_SQL)
        conn.executescript(INDEXES_SQL)
        ensure_question_hint(conn)
        ensure_game_played_at(conn)
        ensure_schema_version(conn)
        conn.commit()

def ensure_question_hint(conn: sqlite3.Connection) -> None:
    """Ensure questions table has question_hint column for existing installs."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA table_info(questions)")
    columns = {row[1] for row in cursor.fetchall()}
    if "question_hint" not in columns:
        cursor.execute("ALTER TABLE questions ADD COLUMN question_hint TEXT")

def ensure_game_played_at(conn: sqlite3.Connection) -> None:
    """Ensure user_games table has played_at column."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA table_info(user_games)")
    columns = {row[1] for row in cursor.fetchall()}
    if "played_at" not in columns:
        cursor.execute("ALTER TABLE user_games ADD COLUMN played_at TEXT")
        cursor.execute("UPDATE user_games SET played_at = datetime('now') WHERE played_at IS NULL")

def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0

def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")

def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        set_schema_version(conn, SCHEMA_VERSION)

@contextmanager
def get_conn():
    """Context manager for SQLite connection, using row_factory for dict-like rows."""
    conn = sqlite3.connect(DB_PATH, detect_types=sqlite3.PARSE_DECLTYPES, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # Ledger rows rely on cascade deletes from their parents
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()

def get_db():
    """FastAPI dependency that yields a DB connection and closes it afterwards."""
    with get_conn() as conn:
        yield conn
