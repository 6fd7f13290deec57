from .service import AuthService
from .deps import (
    get_database,
    get_completion_client,
    get_auth_service,
    get_current_user,
    get_optional_user,
    get_current_user_id,
    require_admin,
)

__all__ = [
    "AuthService",
    "get_database",
    "get_completion_client",
    "get_auth_service",
    "get_current_user",
    "get_optional_user",
    "get_current_user_id",
    "require_admin",
]
