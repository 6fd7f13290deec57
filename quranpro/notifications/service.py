"""
In-app notifications
"""
from typing import Any, Dict, List, Optional

from quranpro.config.logger import logger
from quranpro.database import DatabaseManager, Notification
from quranpro.exceptions import NotFound

MAX_NOTIFICATIONS = 100


class NotificationService:
    def __init__(self, db: DatabaseManager):
        self.db = db

    def notify(self, user_id: str, title: str, message: str,
               notification_type: str = "general", metadata: Optional[Dict[str, Any]] = None) -> int:
        if not self.db.get_user_by_id(user_id):
            raise NotFound("User not found")
        notification_id = self.db.create_notification(user_id, title, message, notification_type, metadata)
        logger.info("notification_created", extra={
            "user_id": user_id,
            "notification_id": notification_id,
            "type": notification_type,
        })
        return notification_id

    def list(self, user_id: str, include_read: bool = False, limit: int = 50) -> List[Notification]:
        limit = max(1, min(limit, MAX_NOTIFICATIONS))
        return self.db.get_notifications(user_id, include_read=include_read, limit=limit)

    def mark_read(self, user_id: str, notification_id: int):
        if not self.db.mark_notification_read(notification_id, user_id):
            raise NotFound("Notification not found")
