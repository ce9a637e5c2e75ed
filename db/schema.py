# SQL schema for Cortex database

SCHEMA_VERSION = 3

SCHEMA_SQL = """
-- Users
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Themes (classic or language topic, never both)
CREATE TABLE IF NOT EXISTS themes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    difficulty TEXT NOT NULL CHECK(difficulty IN ('Easy', 'Medium', 'Hard')),
    is_language_topic INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);

-- Classic questions; options and correct_options are JSON arrays
CREATE TABLE IF NOT EXISTS questions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    theme_id INTEGER NOT NULL,
    question_text TEXT NOT NULL,
    question_type TEXT NOT NULL CHECK(question_type IN ('input', 'select', 'radiobutton')),
    is_strict INTEGER NOT NULL DEFAULT 0,
    options TEXT,
    answer TEXT,
    correct_options TEXT,
    question_hint TEXT,
    FOREIGN KEY (theme_id) REFERENCES themes (id) ON DELETE CASCADE
);

-- Vocabulary entries of language themes
CREATE TABLE IF NOT EXISTS language_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    theme_id INTEGER NOT NULL,
    word TEXT NOT NULL,
    description TEXT,
    translation TEXT NOT NULL,
    FOREIGN KEY (theme_id) REFERENCES themes (id) ON DELETE CASCADE
);

-- Per-user mastery of strict questions (signed clamped counter)
CREATE TABLE IF NOT EXISTS user_question_stats (
    user_id INTEGER NOT NULL,
    question_id INTEGER NOT NULL,
    knowledge_level INTEGER NOT NULL DEFAULT 0 CHECK(knowledge_level BETWEEN 0 AND 3),
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (user_id, question_id),
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (question_id) REFERENCES questions (id) ON DELETE CASCADE
);

-- Per-user correct streak of language entries (reset on miss)
CREATE TABLE IF NOT EXISTS user_language_entry_stats (
    user_id INTEGER NOT NULL,
    entry_id INTEGER NOT NULL,
    correct_streak INTEGER NOT NULL DEFAULT 0,
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (user_id, entry_id),
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (entry_id) REFERENCES language_entries (id) ON DELETE CASCADE
);

-- Session summaries (append-only)
CREATE TABLE IF NOT EXISTS user_games (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    questions_answered INTEGER NOT NULL DEFAULT 0,
    correct_answers INTEGER NOT NULL DEFAULT 0,
    max_correct_in_row INTEGER NOT NULL DEFAULT 0,
    played_at TEXT NOT NULL DEFAULT (datetime('now')),
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_themes_user ON themes (user_id);
CREATE INDEX IF NOT EXISTS idx_questions_theme ON questions (theme_id);
CREATE INDEX IF NOT EXISTS idx_questions_strict ON questions (theme_id, is_strict);
CREATE INDEX IF NOT EXISTS idx_language_entries_theme ON language_entries (theme_id);
CREATE INDEX IF NOT EXISTS idx_user_question_stats_question ON user_question_stats (question_id);
CREATE INDEX IF NOT EXISTS idx_user_language_entry_stats_entry ON user_language_entry_stats (entry_id);
CREATE INDEX IF NOT EXISTS idx_user_games_user ON user_games (user_id, played_at);
"""
