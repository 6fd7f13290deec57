"""
Database operations for the Quran Pro API
"""
import json
from typing import Any, Dict, List, Optional, Sequence

from psycopg2.extras import RealDictCursor

from quranpro.config.settings import settings
from quranpro.config.logger import logger
from quranpro.config.utils import escape_like, load_json
from quranpro.database.pool import ConnectionPool
from quranpro.database.schema import schema_statements
from quranpro.database.models import (
    User, Conversation, Message, ReadingProgress, HistoryEntry, Favorite,
    ReadingGoal, ReadingSession, DailyStats, Notification,
)

_USER_COLUMNS = (
    "id, email, name, google_id, picture, preferences, role, "
    "messages_used, messages_quota, created_at, last_login"
)
_CONVERSATION_COLUMNS = "id, user_id, title, status, created_at, updated_at"
_MESSAGE_COLUMNS = "id, user_id, conversation_id, sender, text, context, created_at"
_STATS_COLUMNS = "stat_date, hasanat, verses, time_seconds, pages_read"


class DatabaseManager:
    """Database operations manager"""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool
        self.is_postgres = pool.is_postgres

    # -------- Lifecycle --------
    def open(self):
        """Open the pool and make sure every table exists"""
        self.pool.open()
        self.init_database()

    def close(self):
        self.pool.close()

    def ping(self) -> bool:
        return self.pool.ping()

    def init_database(self):
        """Initialize database tables"""
        with self.pool.connection() as conn:
            cur = conn.cursor()
            for statement in schema_statements(self.is_postgres, settings.DEFAULT_MESSAGES_QUOTA):
                cur.execute(statement)
        logger.info("db_schema_ready", extra={"backend": "postgresql" if self.is_postgres else "sqlite"})

    # -------- Query helpers --------
    def _get_placeholder(self) -> str:
        """Get the appropriate parameter placeholder for the database type"""
        return "%s" if self.is_postgres else "?"

    def _cursor(self, conn):
        if self.is_postgres:
            return conn.cursor(cursor_factory=RealDictCursor)
        return conn.cursor()

    def _fetch_one(self, query: str, params: Sequence = ()) -> Optional[Dict[str, Any]]:
        with self.pool.connection() as conn:
            cur = self._cursor(conn)
            cur.execute(query, tuple(params))
            row = cur.fetchone()
            return dict(row) if row else None

    def _fetch_all(self, query: str, params: Sequence = ()) -> List[Dict[str, Any]]:
        with self.pool.connection() as conn:
            cur = self._cursor(conn)
            cur.execute(query, tuple(params))
            return [dict(row) for row in cur.fetchall()]

    def _execute(self, query: str, params: Sequence = ()) -> int:
        """Run a write statement and return the affected row count"""
        with self.pool.connection() as conn:
            cur = conn.cursor()
            cur.execute(query, tuple(params))
            return cur.rowcount

    def _insert(self, cur, query: str, params: Sequence) -> int:
        """Insert one row on an open cursor and return its generated id"""
        if self.is_postgres:
            cur.execute(query + " RETURNING id", tuple(params))
            row = cur.fetchone()
            return row["id"] if isinstance(row, dict) else row[0]
        cur.execute(query, tuple(params))
        return cur.lastrowid

    def _insert_one(self, query: str, params: Sequence) -> int:
        with self.pool.connection() as conn:
            return self._insert(self._cursor(conn), query, params)

    # -------- Row mapping --------
    @staticmethod
    def _map_user_row(row: Optional[Dict[str, Any]]) -> Optional[User]:
        if not row:
            return None
        return User(
            id=row["id"],
            email=row["email"],
            name=row.get("name") or "",
            google_id=row.get("google_id"),
            picture=row.get("picture"),
            preferences=load_json(row.get("preferences"), default={}),
            role=row.get("role") or "user",
            messages_used=row.get("messages_used") or 0,
            messages_quota=row.get("messages_quota") or settings.DEFAULT_MESSAGES_QUOTA,
            created_at=row.get("created_at"),
            last_login=row.get("last_login"),
        )

    @staticmethod
    def _map_conversation_row(row: Optional[Dict[str, Any]]) -> Optional[Conversation]:
        if not row:
            return None
        return Conversation(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            status=row["status"],
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    @staticmethod
    def _map_message_row(row: Dict[str, Any]) -> Message:
        return Message(
            id=row["id"],
            user_id=row["user_id"],
            conversation_id=row["conversation_id"],
            sender=row["sender"],
            text=row["text"],
            context=row.get("context"),
            timestamp=row.get("created_at"),
        )

    @staticmethod
    def _map_stats_row(row: Dict[str, Any]) -> DailyStats:
        stat_date = row.get("stat_date")
        return DailyStats(
            stat_date=str(stat_date) if stat_date is not None else None,
            hasanat=int(row.get("hasanat") or 0),
            verses=int(row.get("verses") or 0),
            time_seconds=int(row.get("time_seconds") or 0),
            pages_read=int(row.get("pages_read") or 0),
        )

    # -------- Users --------
    def create_user(
        self,
        user_id: str,
        email: str,
        name: str,
        google_id: Optional[str] = None,
        picture: Optional[str] = None,
        preferences: Optional[Dict[str, Any]] = None,
        role: str = "user",
        messages_quota: Optional[int] = None,
    ) -> User:
        """Create a new user"""
        p = self._get_placeholder()
        self._execute(
            f"INSERT INTO users (id, email, name, google_id, picture, preferences, role, messages_used, messages_quota) "
            f"VALUES ({p}, {p}, {p}, {p}, {p}, {p}, {p}, 0, {p})",
            (
                user_id, email, name, google_id, picture, json.dumps(preferences or {}), role,
                messages_quota or settings.DEFAULT_MESSAGES_QUOTA,
            ),
        )
        return self.get_user_by_id(user_id)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        p = self._get_placeholder()
        return self._map_user_row(self._fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = {p}", (user_id,)))

    def get_user_by_email(self, email: str) -> Optional[User]:
        p = self._get_placeholder()
        return self._map_user_row(
            self._fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE LOWER(email) = LOWER({p})", (email,))
        )

    def get_user_by_google_id(self, google_id: str) -> Optional[User]:
        p = self._get_placeholder()
        return self._map_user_row(
            self._fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE google_id = {p}", (google_id,))
        )

    def update_user_google_id(self, user_id: str, google_id: str) -> bool:
        p = self._get_placeholder()
        return self._execute(f"UPDATE users SET google_id = {p} WHERE id = {p}", (google_id, user_id)) > 0

    def record_user_login(self, user_id: str, role: str) -> bool:
        """Stamp last_login and apply the configured role"""
        p = self._get_placeholder()
        return self._execute(
            f"UPDATE users SET last_login = CURRENT_TIMESTAMP, role = {p} WHERE id = {p}",
            (role, user_id),
        ) > 0

    def update_user_preferences(self, user_id: str, preferences: Dict[str, Any]) -> bool:
        p = self._get_placeholder()
        return self._execute(
            f"UPDATE users SET preferences = {p} WHERE id = {p}",
            (json.dumps(preferences or {}), user_id),
        ) > 0

    def update_user_profile(self, user_id: str, **kwargs) -> bool:
        """Update editable profile columns (name, picture)"""
        p = self._get_placeholder()
        update_fields = []
        params = []

        for key, value in kwargs.items():
            if key not in ("name", "picture"):
                raise ValueError(f"Unsupported profile field: {key}")
            if value is not None:
                update_fields.append(f"{key} = {p}")
                params.append(value)

        if not update_fields:
            return False

        params.append(user_id)
        return self._execute(f"UPDATE users SET {', '.join(update_fields)} WHERE id = {p}", params) > 0

    def delete_user(self, user_id: str) -> bool:
        """Delete a user and, through the foreign keys, all their data"""
        p = self._get_placeholder()
        return self._execute(f"DELETE FROM users WHERE id = {p}", (user_id,)) > 0

    def get_all_users(self, search: Optional[str] = None) -> List[User]:
        p = self._get_placeholder()
        query = f"SELECT {_USER_COLUMNS} FROM users"
        params: List[Any] = []
        if search:
            pattern = f"%{escape_like(search.lower())}%"
            query += f" WHERE LOWER(email) LIKE {p} ESCAPE '\\' OR LOWER(name) LIKE {p} ESCAPE '\\'"
            params.extend([pattern, pattern])
        query += " ORDER BY created_at DESC"
        return [self._map_user_row(row) for row in self._fetch_all(query, params)]

    # -------- Chatbot quota --------
    def get_quota_counters(self, user_id: str) -> Optional[Dict[str, int]]:
        p = self._get_placeholder()
        row = self._fetch_one(
            f"SELECT messages_used, messages_quota FROM users WHERE id = {p}",
            (user_id,),
        )
        if not row:
            return None
        return {
            "used": row.get("messages_used") or 0,
            "quota": row["messages_quota"] if row.get("messages_quota") is not None else settings.DEFAULT_MESSAGES_QUOTA,
        }

    def increment_messages_used(self, user_id: str) -> int:
        """Single atomic add; concurrent increments never overwrite each other"""
        p = self._get_placeholder()
        return self._execute(
            f"UPDATE users SET messages_used = COALESCE(messages_used, 0) + 1 WHERE id = {p}",
            (user_id,),
        )

    def reset_messages_used(self, user_id: str) -> bool:
        p = self._get_placeholder()
        return self._execute(f"UPDATE users SET messages_used = 0 WHERE id = {p}", (user_id,)) > 0

    def set_messages_quota(self, user_id: str, quota: int) -> bool:
        p = self._get_placeholder()
        return self._execute(f"UPDATE users SET messages_quota = {p} WHERE id = {p}", (quota, user_id)) > 0

    # -------- Conversations --------
    def create_conversation(self, user_id: str, title: str) -> Conversation:
        p = self._get_placeholder()
        conversation_id = self._insert_one(
            f"INSERT INTO conversations (user_id, title, status) VALUES ({p}, {p}, 0)",
            (user_id, title),
        )
        return self.get_conversation(conversation_id)

    def get_conversation(self, conversation_id: int) -> Optional[Conversation]:
        p = self._get_placeholder()
        return self._map_conversation_row(
            self._fetch_one(f"SELECT {_CONVERSATION_COLUMNS} FROM conversations WHERE id = {p}", (conversation_id,))
        )

    def get_user_conversations(self, user_id: str) -> List[Conversation]:
        p = self._get_placeholder()
        rows = self._fetch_all(
            f"SELECT {_CONVERSATION_COLUMNS} FROM conversations WHERE user_id = {p} "
            f"ORDER BY created_at DESC, id DESC",
            (user_id,),
        )
        return [self._map_conversation_row(row) for row in rows]

    def update_conversation_title(self, user_id: str, conversation_id: int, title: str) -> bool:
        p = self._get_placeholder()
        return self._execute(
            f"UPDATE conversations SET title = {p}, updated_at = CURRENT_TIMESTAMP WHERE id = {p} AND user_id = {p}",
            (title, conversation_id, user_id),
        ) > 0

    def update_conversation_status(self, user_id: str, conversation_id: int, status: int) -> bool:
        p = self._get_placeholder()
        return self._execute(
            f"UPDATE conversations SET status = {p}, updated_at = CURRENT_TIMESTAMP WHERE id = {p} AND user_id = {p}",
            (status, conversation_id, user_id),
        ) > 0

    def delete_conversation(self, user_id: str, conversation_id: int) -> bool:
        """Delete an owned conversation; its messages go with it (ON DELETE CASCADE)"""
        p = self._get_placeholder()
        return self._execute(
            f"DELETE FROM conversations WHERE id = {p} AND user_id = {p}",
            (conversation_id, user_id),
        ) > 0

    # -------- Messages --------
    def add_message(
        self,
        user_id: str,
        conversation_id: int,
        sender: str,
        text: str,
        context: Optional[str] = None,
    ) -> Optional[int]:
        """Append a message to an owned conversation; None when not found or not owned"""
        p = self._get_placeholder()
        with self.pool.connection() as conn:
            cur = self._cursor(conn)
            cur.execute(
                f"SELECT id FROM conversations WHERE id = {p} AND user_id = {p}",
                (conversation_id, user_id),
            )
            if not cur.fetchone():
                return None

            message_id = self._insert(
                cur,
                f"INSERT INTO messages (user_id, conversation_id, sender, text, context) "
                f"VALUES ({p}, {p}, {p}, {p}, {p})",
                (user_id, conversation_id, sender, text, context),
            )
            cur.execute(
                f"UPDATE conversations SET updated_at = CURRENT_TIMESTAMP WHERE id = {p}",
                (conversation_id,),
            )
            return message_id

    def get_recent_messages(self, user_id: str, conversation_id: int, limit: int) -> List[Message]:
        """Up to ``limit`` latest messages, returned oldest to newest"""
        p = self._get_placeholder()
        rows = self._fetch_all(
            f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE user_id = {p} AND conversation_id = {p} "
            f"ORDER BY created_at DESC, id DESC LIMIT {p}",
            (user_id, conversation_id, limit),
        )
        rows.reverse()
        return [self._map_message_row(row) for row in rows]

    def get_conversation_messages(self, user_id: str, conversation_id: int) -> List[Message]:
        p = self._get_placeholder()
        rows = self._fetch_all(
            f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE user_id = {p} AND conversation_id = {p} "
            f"ORDER BY created_at ASC, id ASC",
            (user_id, conversation_id),
        )
        return [self._map_message_row(row) for row in rows]

    def search_messages(self, user_id: str, conversation_id: int, term: str) -> List[Message]:
        """Case-insensitive literal substring search"""
        p = self._get_placeholder()
        pattern = f"%{escape_like(term.lower())}%"
        rows = self._fetch_all(
            f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE user_id = {p} AND conversation_id = {p} "
            f"AND LOWER(text) LIKE {p} ESCAPE '\\' "
            f"ORDER BY created_at ASC, id ASC",
            (user_id, conversation_id, pattern),
        )
        return [self._map_message_row(row) for row in rows]

    # -------- Reading progress --------
    def upsert_reading_progress(self, user_id: str, surah: int, ayah: int) -> bool:
        p = self._get_placeholder()
        self._execute(
            f"INSERT INTO reading_progress (user_id, surah, ayah) VALUES ({p}, {p}, {p}) "
            f"ON CONFLICT (user_id) DO UPDATE SET surah = excluded.surah, ayah = excluded.ayah, "
            f"updated_at = CURRENT_TIMESTAMP",
            (user_id, surah, ayah),
        )
        return True

    def get_reading_progress(self, user_id: str) -> Optional[ReadingProgress]:
        p = self._get_placeholder()
        row = self._fetch_one(
            f"SELECT surah, ayah, updated_at FROM reading_progress WHERE user_id = {p}",
            (user_id,),
        )
        if not row:
            return None
        return ReadingProgress(surah=row["surah"], ayah=row["ayah"], updated_at=row.get("updated_at"))

    # -------- Reading history --------
    def add_history_entry(self, user_id: str, surah: int, ayah: int, action_type: Optional[str], duration_seconds: int) -> int:
        p = self._get_placeholder()
        return self._insert_one(
            f"INSERT INTO reading_history (user_id, surah, ayah, action_type, duration_seconds) "
            f"VALUES ({p}, {p}, {p}, {p}, {p})",
            (user_id, surah, ayah, action_type, duration_seconds),
        )

    def get_history(self, user_id: str, limit: int) -> List[HistoryEntry]:
        p = self._get_placeholder()
        rows = self._fetch_all(
            f"SELECT id, surah, ayah, action_type, duration_seconds, created_at FROM reading_history "
            f"WHERE user_id = {p} ORDER BY created_at DESC, id DESC LIMIT {p}",
            (user_id, limit),
        )
        return [HistoryEntry(**row) for row in rows]

    # -------- Favorites --------
    def add_favorite(self, user_id: str, fav_type: str, reference_id: Optional[str],
                     reference_text: Optional[str], notes: Optional[str]) -> int:
        p = self._get_placeholder()
        return self._insert_one(
            f"INSERT INTO favorites (user_id, type, reference_id, reference_text, notes) "
            f"VALUES ({p}, {p}, {p}, {p}, {p})",
            (user_id, fav_type, reference_id, reference_text, notes),
        )

    def get_favorites(self, user_id: str) -> List[Favorite]:
        p = self._get_placeholder()
        rows = self._fetch_all(
            f"SELECT id, user_id, type, reference_id, reference_text, notes, created_at FROM favorites "
            f"WHERE user_id = {p} ORDER BY created_at DESC, id DESC",
            (user_id,),
        )
        return [Favorite(**row) for row in rows]

    def delete_favorite(self, user_id: str, favorite_id: int) -> bool:
        p = self._get_placeholder()
        return self._execute(
            f"DELETE FROM favorites WHERE id = {p} AND user_id = {p}",
            (favorite_id, user_id),
        ) > 0

    # -------- Reading goals --------
    def create_goal(self, user_id: str, goal_type: str, target_value: int,
                    start_date: Optional[str], end_date: Optional[str]) -> int:
        p = self._get_placeholder()
        return self._insert_one(
            f"INSERT INTO reading_goals (user_id, goal_type, target_value, start_date, end_date) "
            f"VALUES ({p}, {p}, {p}, {p}, {p})",
            (user_id, goal_type, target_value, start_date, end_date),
        )

    def get_goals(self, user_id: str) -> List[ReadingGoal]:
        p = self._get_placeholder()
        rows = self._fetch_all(
            f"SELECT id, user_id, goal_type, target_value, current_value, start_date, end_date, is_completed, created_at "
            f"FROM reading_goals WHERE user_id = {p} ORDER BY created_at DESC, id DESC",
            (user_id,),
        )
        goals = []
        for row in rows:
            row["is_completed"] = bool(row["is_completed"])
            for key in ("start_date", "end_date"):
                if row[key] is not None:
                    row[key] = str(row[key])
            goals.append(ReadingGoal(**row))
        return goals

    def update_goal(self, user_id: str, goal_id: int, current_value: int, is_completed: bool) -> bool:
        p = self._get_placeholder()
        return self._execute(
            f"UPDATE reading_goals SET current_value = {p}, is_completed = {p} WHERE id = {p} AND user_id = {p}",
            (current_value, bool(is_completed), goal_id, user_id),
        ) > 0

    # -------- Reading sessions --------
    def start_reading_session(self, user_id: str, device_info: Dict[str, Any], start_time: str) -> int:
        p = self._get_placeholder()
        return self._insert_one(
            f"INSERT INTO reading_sessions (user_id, device_info, start_time) VALUES ({p}, {p}, {p})",
            (user_id, json.dumps(device_info or {}), start_time),
        )

    def get_reading_session(self, user_id: str, session_id: int) -> Optional[ReadingSession]:
        p = self._get_placeholder()
        row = self._fetch_one(
            f"SELECT id, user_id, device_info, start_time, end_time, duration_seconds, verses_read, hasanat_earned "
            f"FROM reading_sessions WHERE id = {p} AND user_id = {p}",
            (session_id, user_id),
        )
        if not row:
            return None
        row["device_info"] = load_json(row.get("device_info"), default={})
        return ReadingSession(**row)

    def end_reading_session(self, user_id: str, session_id: int, end_time: str, duration_seconds: int,
                            verses_read: int, hasanat_earned: int) -> bool:
        p = self._get_placeholder()
        return self._execute(
            f"UPDATE reading_sessions SET end_time = {p}, duration_seconds = {p}, verses_read = {p}, "
            f"hasanat_earned = {p} WHERE id = {p} AND user_id = {p}",
            (end_time, duration_seconds, verses_read, hasanat_earned, session_id, user_id),
        ) > 0

    # -------- Daily statistics --------
    def increment_daily_stats(self, user_id: str, stat_date: str, hasanat: int, verses: int,
                              time_seconds: int, pages_read: int):
        """Add to the (user, day) row, creating it on first write"""
        p = self._get_placeholder()
        self._execute(
            f"INSERT INTO quran_stats (user_id, stat_date, hasanat, verses, time_seconds, pages_read) "
            f"VALUES ({p}, {p}, {p}, {p}, {p}, {p}) "
            f"ON CONFLICT (user_id, stat_date) DO UPDATE SET "
            f"hasanat = quran_stats.hasanat + excluded.hasanat, "
            f"verses = quran_stats.verses + excluded.verses, "
            f"time_seconds = quran_stats.time_seconds + excluded.time_seconds, "
            f"pages_read = quran_stats.pages_read + excluded.pages_read",
            (user_id, stat_date, hasanat, verses, time_seconds, pages_read),
        )

    def get_daily_stats(self, user_id: str, stat_date: str) -> Optional[DailyStats]:
        p = self._get_placeholder()
        row = self._fetch_one(
            f"SELECT {_STATS_COLUMNS} FROM quran_stats WHERE user_id = {p} AND stat_date = {p}",
            (user_id, stat_date),
        )
        return self._map_stats_row(row) if row else None

    def get_stats_range(
        self,
        user_id: str,
        start_date: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[DailyStats]:
        p = self._get_placeholder()
        query = f"SELECT {_STATS_COLUMNS} FROM quran_stats WHERE user_id = {p}"
        params: List[Any] = [user_id]
        if start_date:
            query += f" AND stat_date >= {p}"
            params.append(start_date)
        query += " ORDER BY stat_date DESC" if descending else " ORDER BY stat_date ASC"
        if limit:
            query += f" LIMIT {p}"
            params.append(limit)
        return [self._map_stats_row(row) for row in self._fetch_all(query, params)]

    def get_stats_totals(self, user_id: str, start_date: Optional[str] = None) -> DailyStats:
        p = self._get_placeholder()
        query = (
            "SELECT COALESCE(SUM(hasanat), 0) AS hasanat, COALESCE(SUM(verses), 0) AS verses, "
            "COALESCE(SUM(time_seconds), 0) AS time_seconds, COALESCE(SUM(pages_read), 0) AS pages_read "
            f"FROM quran_stats WHERE user_id = {p}"
        )
        params: List[Any] = [user_id]
        if start_date:
            query += f" AND stat_date >= {p}"
            params.append(start_date)
        return self._map_stats_row(self._fetch_one(query, params) or {})

    def get_global_daily_stats(self, start_date: str, limit: int = 30) -> List[Dict[str, Any]]:
        p = self._get_placeholder()
        rows = self._fetch_all(
            f"SELECT stat_date, COUNT(DISTINCT user_id) AS active_users, "
            f"SUM(hasanat) AS hasanat, SUM(verses) AS verses, "
            f"SUM(time_seconds) AS time_seconds, SUM(pages_read) AS pages_read "
            f"FROM quran_stats WHERE stat_date >= {p} GROUP BY stat_date ORDER BY stat_date DESC LIMIT {p}",
            (start_date, limit),
        )
        return [
            {
                "date": str(row["stat_date"]),
                "active_users": int(row["active_users"] or 0),
                "hasanat": int(row["hasanat"] or 0),
                "verses": int(row["verses"] or 0),
                "time_seconds": int(row["time_seconds"] or 0),
                "pages_read": int(row["pages_read"] or 0),
            }
            for row in rows
        ]

    def get_top_users_by_hasanat(self, limit: int = 100) -> List[Dict[str, Any]]:
        p = self._get_placeholder()
        rows = self._fetch_all(
            "SELECT u.id, u.name, u.email, "
            "COALESCE(SUM(s.hasanat), 0) AS total_hasanat, COALESCE(SUM(s.verses), 0) AS total_verses, "
            "COALESCE(SUM(s.time_seconds), 0) AS total_time_seconds, "
            "COALESCE(SUM(s.pages_read), 0) AS total_pages_read, COUNT(s.id) AS active_days "
            "FROM users u LEFT JOIN quran_stats s ON s.user_id = u.id "
            "GROUP BY u.id, u.name, u.email "
            f"ORDER BY total_hasanat DESC LIMIT {p}",
            (limit,),
        )
        for row in rows:
            for key in ("total_hasanat", "total_verses", "total_time_seconds", "total_pages_read", "active_days"):
                row[key] = int(row[key] or 0)
        return rows

    # -------- Notifications --------
    def create_notification(self, user_id: str, title: str, message: str,
                            notification_type: str = "general", metadata: Dict[str, Any] = None) -> int:
        """Create in-app notification"""
        p = self._get_placeholder()
        metadata_json = json.dumps(metadata) if metadata else None
        return self._insert_one(
            f"INSERT INTO notifications (user_id, title, message, notification_type, metadata) "
            f"VALUES ({p}, {p}, {p}, {p}, {p})",
            (user_id, title, message, notification_type, metadata_json),
        )

    def get_notifications(self, user_id: str, include_read: bool = False, limit: int = 50) -> List[Notification]:
        """Retrieve notifications for a user"""
        p = self._get_placeholder()
        query = (
            f"SELECT id, user_id, title, message, notification_type, metadata, is_read, created_at "
            f"FROM notifications WHERE user_id = {p}"
        )
        params: List[Any] = [user_id]
        if not include_read:
            query += f" AND is_read = {p}"
            params.append(False)
        query += f" ORDER BY created_at DESC, id DESC LIMIT {p}"
        params.append(limit)

        notifications = []
        for row in self._fetch_all(query, params):
            notifications.append(Notification(
                id=row["id"],
                user_id=row["user_id"],
                title=row["title"],
                message=row["message"],
                notification_type=row["notification_type"],
                metadata=load_json(row.get("metadata")),
                is_read=bool(row["is_read"]),
                created_at=row.get("created_at"),
            ))
        return notifications

    def mark_notification_read(self, notification_id: int, user_id: str) -> bool:
        """Mark notification as read"""
        p = self._get_placeholder()
        return self._execute(
            f"UPDATE notifications SET is_read = {p} WHERE id = {p} AND user_id = {p}",
            (True, notification_id, user_id),
        ) > 0
