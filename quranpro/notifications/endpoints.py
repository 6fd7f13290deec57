"""
Notification API endpoints for the Quran Pro API
"""
from fastapi import APIRouter, Depends

from quranpro.auth.deps import get_current_user_id, get_database
from quranpro.database import DatabaseManager
from quranpro.notifications.service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def get_notification_service(db: DatabaseManager = Depends(get_database)) -> NotificationService:
    return NotificationService(db)


@router.get("")
def list_notifications(
    include_read: bool = False,
    limit: int = 50,
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
):
    notifications = service.list(user_id, include_read=include_read, limit=limit)
    return {"notifications": [notification.to_dict() for notification in notifications]}


@router.put("/{notification_id}/read")
def mark_notification_read(
    notification_id: int,
    user_id: str = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
):
    service.mark_read(user_id, notification_id)
    return {"success": True}
