"""
Table definitions shared by the PostgreSQL and SQLite backends
"""
from typing import List

_TABLES = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id VARCHAR(64) PRIMARY KEY,
        email VARCHAR(255) UNIQUE NOT NULL,
        google_id VARCHAR(255) UNIQUE,
        name VARCHAR(255) NOT NULL DEFAULT '',
        picture TEXT,
        preferences TEXT,
        role VARCHAR(32) NOT NULL DEFAULT 'user',
        messages_used INTEGER NOT NULL DEFAULT 0,
        messages_quota INTEGER NOT NULL DEFAULT {default_quota},
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        last_login TIMESTAMP NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS conversations (
        id {pk},
        user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title VARCHAR(255) NOT NULL,
        status SMALLINT NOT NULL DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS messages (
        id {pk},
        user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        conversation_id INTEGER NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
        sender VARCHAR(8) NOT NULL CHECK (sender IN ('user', 'bot')),
        text TEXT NOT NULL,
        context TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reading_progress (
        user_id VARCHAR(64) PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
        surah INTEGER NOT NULL DEFAULT 1,
        ayah INTEGER NOT NULL DEFAULT 1,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reading_history (
        id {pk},
        user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        surah INTEGER NOT NULL,
        ayah INTEGER NOT NULL,
        action_type VARCHAR(32),
        duration_seconds INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS favorites (
        id {pk},
        user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        type VARCHAR(32) NOT NULL,
        reference_id VARCHAR(64),
        reference_text TEXT,
        notes TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reading_goals (
        id {pk},
        user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        goal_type VARCHAR(32) NOT NULL,
        target_value INTEGER NOT NULL DEFAULT 0,
        current_value INTEGER NOT NULL DEFAULT 0,
        start_date DATE,
        end_date DATE,
        is_completed BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reading_sessions (
        id {pk},
        user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        device_info TEXT,
        start_time TIMESTAMP NOT NULL,
        end_time TIMESTAMP NULL,
        duration_seconds INTEGER NOT NULL DEFAULT 0,
        verses_read INTEGER NOT NULL DEFAULT 0,
        hasanat_earned INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS quran_stats (
        id {pk},
        user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        stat_date DATE NOT NULL,
        hasanat INTEGER NOT NULL DEFAULT 0,
        verses INTEGER NOT NULL DEFAULT 0,
        time_seconds INTEGER NOT NULL DEFAULT 0,
        pages_read INTEGER NOT NULL DEFAULT 0,
        UNIQUE (user_id, stat_date)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS notifications (
        id {pk},
        user_id VARCHAR(64) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title VARCHAR(255) NOT NULL,
        message TEXT NOT NULL,
        notification_type VARCHAR(50) NOT NULL DEFAULT 'general',
        metadata TEXT,
        is_read BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
]

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_conversations_user ON conversations (user_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages (conversation_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_messages_user ON messages (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_history_user ON reading_history (user_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_favorites_user ON favorites (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_goals_user ON reading_goals (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_sessions_user ON reading_sessions (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_stats_date ON quran_stats (stat_date)",
    "CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications (user_id, is_read)",
]


def schema_statements(is_postgres: bool, default_quota: int) -> List[str]:
    """Return the DDL for the active backend, tables before indexes"""
    pk = "SERIAL PRIMARY KEY" if is_postgres else "INTEGER PRIMARY KEY AUTOINCREMENT"
    tables = [sql.format(pk=pk, default_quota=int(default_quota)) for sql in _TABLES]
    return tables + list(_INDEXES)
