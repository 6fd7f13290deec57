"""
Reading tracking services: progress, history, favorites, goals, sessions and daily stats
"""
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from quranpro.config.settings import settings
from quranpro.config.logger import logger
from quranpro.config.utils import ensure_datetime
from quranpro.database import (
    DailyStats, DatabaseManager, Favorite, HistoryEntry, ReadingGoal, ReadingProgress, ReadingSession,
)
from quranpro.exceptions import NotFound, ValidationError

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Days before today included in each named period; None means no lower bound
PERIOD_WINDOWS = {
    "today": 0,
    "week": 6,
    "month": 29,
    "year": 364,
    "all": None,
}


def clamp_limit(value: Any, default: int, maximum: int) -> int:
    """Parse a positive limit, falling back to ``default`` and capping at ``maximum``"""
    try:
        limit = int(value)
    except (TypeError, ValueError):
        limit = default
    if limit <= 0:
        limit = default
    return min(limit, maximum)


class TrackingService:
    """Per-user tracking stores; every query is scoped to the caller"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    @staticmethod
    def _today() -> date:
        return date.today()

    # -------- Progress --------
    def save_progress(self, user_id: str, surah: int, ayah: int):
        self.db.upsert_reading_progress(user_id, surah, ayah)

    def get_progress(self, user_id: str) -> ReadingProgress:
        return self.db.get_reading_progress(user_id) or ReadingProgress(surah=1, ayah=1, updated_at=None)

    # -------- History --------
    def add_history(self, user_id: str, surah: int, ayah: int, action_type: Optional[str], duration: int) -> int:
        return self.db.add_history_entry(user_id, surah, ayah, action_type, duration or 0)

    def get_history(self, user_id: str, limit: Any = None) -> List[HistoryEntry]:
        limit = clamp_limit(limit, settings.HISTORY_DEFAULT_LIMIT, settings.HISTORY_MAX_LIMIT)
        return self.db.get_history(user_id, limit)

    # -------- Favorites --------
    def add_favorite(self, user_id: str, fav_type: str, reference_id: Optional[str] = None,
                     reference_text: Optional[str] = None, notes: Optional[str] = None) -> int:
        return self.db.add_favorite(user_id, fav_type, reference_id, reference_text, notes)

    def get_favorites(self, user_id: str) -> List[Favorite]:
        return self.db.get_favorites(user_id)

    def delete_favorite(self, user_id: str, favorite_id: int):
        if not self.db.delete_favorite(user_id, favorite_id):
            raise NotFound("Favorite not found")

    # -------- Goals --------
    def create_goal(self, user_id: str, goal_type: str, target_value: int,
                    start_date: Optional[date] = None, end_date: Optional[date] = None) -> int:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("endDate must not be before startDate")
        return self.db.create_goal(
            user_id,
            goal_type,
            target_value,
            start_date.isoformat() if start_date else None,
            end_date.isoformat() if end_date else None,
        )

    def get_goals(self, user_id: str) -> List[ReadingGoal]:
        return self.db.get_goals(user_id)

    def update_goal(self, user_id: str, goal_id: int, current_value: int, is_completed: bool):
        if not self.db.update_goal(user_id, goal_id, current_value, is_completed):
            raise NotFound("Goal not found")

    # -------- Reading sessions --------
    def start_session(self, user_id: str, device_info: Optional[Dict[str, Any]] = None) -> int:
        start_time = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return self.db.start_reading_session(user_id, device_info or {}, start_time)

    def end_session(self, user_id: str, session_id: int, verses_read: int = 0, hasanat_earned: int = 0) -> ReadingSession:
        session = self.db.get_reading_session(user_id, session_id)
        if not session:
            raise NotFound("Session not found")

        end_time = datetime.now().replace(microsecond=0)
        started = ensure_datetime(session.start_time)
        duration = 0
        if started:
            duration = max(int((end_time - started.replace(tzinfo=None)).total_seconds()), 0)

        self.db.end_reading_session(
            user_id,
            session_id,
            end_time.strftime("%Y-%m-%d %H:%M:%S"),
            duration,
            verses_read or 0,
            hasanat_earned or 0,
        )
        logger.info("reading_session_ended", extra={"user_id": user_id, "session_id": session_id, "duration_seconds": duration})
        return self.db.get_reading_session(user_id, session_id)

    # -------- Daily stats --------
    def increment_stats(self, user_id: str, hasanat: int = 0, verses: int = 0,
                        time_seconds: int = 0, pages_read: int = 0) -> bool:
        """Add to today's row; returns False when there was nothing to add"""
        if not (hasanat or verses or time_seconds or pages_read):
            return False
        self.db.increment_daily_stats(
            user_id, self._today().isoformat(), hasanat, verses, time_seconds, pages_read
        )
        return True

    def get_today(self, user_id: str) -> List[DailyStats]:
        stats = self.db.get_daily_stats(user_id, self._today().isoformat())
        return [stats] if stats else []

    def get_week(self, user_id: str) -> List[DailyStats]:
        start = self._today() - timedelta(days=6)
        return self.db.get_stats_range(user_id, start_date=start.isoformat())

    def get_all(self, user_id: str) -> List[DailyStats]:
        return self.db.get_stats_range(user_id)

    def get_daily(self, user_id: str, days: Any = None) -> List[DailyStats]:
        """Most recent ``days`` rows, newest first"""
        limit = clamp_limit(days, settings.DAILY_STATS_DEFAULT_DAYS, settings.DAILY_STATS_MAX_DAYS)
        return self.db.get_stats_range(user_id, descending=True, limit=limit)

    def get_period(self, user_id: str, period: str) -> DailyStats:
        """Totals for one day (YYYY-MM-DD) or a named period"""
        if _DATE_PATTERN.match(period or ""):
            try:
                day = date.fromisoformat(period)
            except ValueError:
                raise ValidationError("Invalid date")
            stats = self.db.get_daily_stats(user_id, day.isoformat())
            if stats:
                stats.stat_date = None
                return stats
            return DailyStats()

        if period not in PERIOD_WINDOWS:
            raise ValidationError(f"Unknown period: {period}")

        window = PERIOD_WINDOWS[period]
        start = None if window is None else (self._today() - timedelta(days=window)).isoformat()
        return self.db.get_stats_totals(user_id, start_date=start)
