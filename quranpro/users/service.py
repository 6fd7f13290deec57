"""
User profile services
"""
from typing import Any, Dict, Optional

from quranpro.config.logger import logger
from quranpro.database import DatabaseManager, User
from quranpro.exceptions import Forbidden, NotFound, ValidationError


class UserService:
    """Profile, preferences and self-service account deletion"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def get_accessible_user(self, caller: User, user_id: str) -> User:
        """Target user when the caller is that user or an admin"""
        if caller.id != user_id and not caller.is_admin:
            raise Forbidden("Access denied")
        user = self.db.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def update_preferences(self, caller: User, user_id: str, preferences: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(preferences, dict):
            raise ValidationError("Preferences must be an object")
        self.get_accessible_user(caller, user_id)
        self.db.update_user_preferences(user_id, preferences)
        return preferences

    def update_profile(self, user_id: str, name: Optional[str] = None, picture: Optional[str] = None) -> User:
        if name is not None and not name.strip():
            raise ValidationError("Name cannot be empty")
        if name is None and picture is None:
            raise ValidationError("Nothing to update")

        self.db.update_user_profile(user_id, name=name.strip() if name else None, picture=picture)
        user = self.db.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def delete_account(self, user_id: str):
        if not self.db.delete_user(user_id):
            raise NotFound("User not found")
        logger.info("user_deleted", extra={"user_id": user_id, "by": "self"})
