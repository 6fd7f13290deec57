"""
Admin API endpoints for the Quran Pro API
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from quranpro.admin.service import AdminService
from quranpro.auth.deps import get_database, require_admin
from quranpro.database import DatabaseManager, User

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class QuotaUpdateRequest(BaseModel):
    quota: int


class NotificationCreateRequest(BaseModel):
    user_id: str = Field(..., alias="userId")
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: str = "general"
    metadata: Optional[Dict[str, Any]] = None

    model_config = {"populate_by_name": True}


def get_admin_service(db: DatabaseManager = Depends(get_database)) -> AdminService:
    return AdminService(db)


@router.get("/users")
def get_all_users(search: Optional[str] = None, service: AdminService = Depends(get_admin_service)):
    """Get all users with optional search"""
    return service.get_all_users(search=search)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Delete a user and all their data"""
    return service.delete_user(admin.id, user_id)


@router.post("/users/{user_id}/quota/reset")
def reset_user_quota(user_id: str, service: AdminService = Depends(get_admin_service)):
    return service.reset_quota(user_id)


@router.put("/users/{user_id}/quota")
def set_user_quota(user_id: str, request: QuotaUpdateRequest, service: AdminService = Depends(get_admin_service)):
    return service.set_quota(user_id, request.quota)


@router.post("/notifications")
def send_notification(request: NotificationCreateRequest, service: AdminService = Depends(get_admin_service)):
    return service.send_notification(request.user_id, request.title, request.message, request.type, request.metadata)


@router.get("/stats/global")
def get_global_stats(service: AdminService = Depends(get_admin_service)):
    return service.get_global_stats()


@router.get("/stats/users")
def get_user_stats(service: AdminService = Depends(get_admin_service)):
    return service.get_user_stats()
