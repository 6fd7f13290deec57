"""
Admin services for the Quran Pro API
"""
from datetime import date, timedelta
from typing import Any, Dict, Optional

from quranpro.config.logger import logger
from quranpro.database import DatabaseManager
from quranpro.exceptions import NotFound
from quranpro.notifications.service import NotificationService
from quranpro.quota.service import QuotaService

GLOBAL_STATS_DAYS = 30
TOP_USERS_LIMIT = 100


class AdminService:
    """Admin service class"""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self.quota = QuotaService(db)
        self.notifications = NotificationService(db)

    def get_all_users(self, search: Optional[str] = None) -> Dict[str, Any]:
        """Get all users with optional search on email or name"""
        users = self.db.get_all_users(search)
        user_entries = [
            {
                "id": user.id,
                "email": user.email,
                "name": user.name,
                "role": user.role,
                "messagesUsed": user.messages_used,
                "messagesQuota": user.messages_quota,
                "created_at": user.created_at,
                "last_login": user.last_login,
            }
            for user in users
        ]
        return {"users": user_entries, "count": len(user_entries)}

    def delete_user(self, admin_id: str, user_id: str) -> Dict[str, Any]:
        """Delete a user and all their data"""
        user = self.db.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found")

        self.db.delete_user(user_id)
        logger.info("user_deleted", extra={"user_id": user_id, "by": admin_id})
        return {
            "message": "User deleted successfully",
            "user_id": user_id,
            "email": user.email,
        }

    def reset_quota(self, user_id: str) -> Dict[str, Any]:
        self.quota.reset(user_id)
        return {"success": True, "user_id": user_id, "messagesUsed": 0}

    def set_quota(self, user_id: str, quota: int) -> Dict[str, Any]:
        self.quota.set_quota(user_id, quota)
        return {"success": True, "user_id": user_id, "messagesQuota": quota}

    def send_notification(self, user_id: str, title: str, message: str,
                          notification_type: str = "general", metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        notification_id = self.notifications.notify(user_id, title, message, notification_type, metadata)
        return {"success": True, "notification_id": notification_id}

    def get_global_stats(self) -> Dict[str, Any]:
        """Per-day totals across all users for the last 30 days, newest first"""
        since = date.today() - timedelta(days=GLOBAL_STATS_DAYS - 1)
        return {"success": True, "stats": self.db.get_global_daily_stats(since.isoformat(), limit=GLOBAL_STATS_DAYS)}

    def get_user_stats(self) -> Dict[str, Any]:
        """Top users by total hasanat"""
        return {"success": True, "stats": self.db.get_top_users_by_hasanat(TOP_USERS_LIMIT)}
