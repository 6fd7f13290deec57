"""
FastAPI dependencies shared by the routers
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from quranpro.auth.service import AuthService
from quranpro.database import DatabaseManager, User
from quranpro.exceptions import Forbidden, Unauthenticated

# Missing header is reported as Unauthenticated (401)
bearer_scheme = HTTPBearer(auto_error=False)


def get_database(request: Request) -> DatabaseManager:
    return request.app.state.db


def get_completion_client(request: Request):
    return request.app.state.completion_client


def get_auth_service(db: DatabaseManager = Depends(get_database)) -> AuthService:
    return AuthService(db)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Validate the Bearer token and return the caller"""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Missing bearer token")
    return auth_service.authenticate_token(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    """Same as get_current_user but yields None instead of failing"""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.authenticate_token(credentials.credentials)
    except Unauthenticated:
        return None


def get_current_user_id(user: User = Depends(get_current_user)) -> str:
    return user.id


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden("Admin access required")
    return user
