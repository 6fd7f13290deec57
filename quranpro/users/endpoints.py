"""
User API endpoints for the Quran Pro API
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from quranpro.auth.deps import get_current_user, get_database
from quranpro.database import DatabaseManager, User
from quranpro.users.service import UserService

router = APIRouter(prefix="/api", tags=["users"])


class PreferencesRequest(BaseModel):
    preferences: Dict[str, Any]


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    picture: Optional[str] = None


def get_user_service(db: DatabaseManager = Depends(get_database)) -> UserService:
    return UserService(db)


@router.get("/users/me")
async def get_me(user: User = Depends(get_current_user)):
    return user.to_dict()


@router.put("/users/me/profile")
def update_my_profile(
    request: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    updated = service.update_profile(user.id, name=request.name, picture=request.picture)
    return {"success": True, "user": updated.to_dict()}


@router.delete("/users/me")
def delete_me(user: User = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    """Delete the caller's account and everything it owns"""
    service.delete_account(user.id)
    return {"success": True}


@router.get("/user/mysql-id")
async def get_user_storage_id(user: User = Depends(get_current_user)):
    """Kept for the web client, which still reads the id under this name"""
    return {"success": True, "mysqlUserId": user.id}


@router.get("/users/{user_id}")
def get_user(
    user_id: str,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.get_accessible_user(user, user_id).to_dict()


@router.put("/users/{user_id}/preferences")
def update_preferences(
    user_id: str,
    request: PreferencesRequest,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    preferences = service.update_preferences(user, user_id, request.preferences)
    return {"success": True, "preferences": preferences}
