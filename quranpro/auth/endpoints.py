"""
Authentication API endpoints for the Quran Pro API
"""
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from quranpro.auth.deps import get_auth_service, get_optional_user
from quranpro.auth.service import AuthService
from quranpro.config.settings import settings
from quranpro.config.logger import logger
from quranpro.database import User
from quranpro.exceptions import AppError

router = APIRouter(tags=["auth"])


class MobileLoginRequest(BaseModel):
    id_token: str = Field(..., alias="idToken", min_length=1)

    model_config = {"populate_by_name": True}


@router.get("/auth/status")
async def auth_status(user: Optional[User] = Depends(get_optional_user)):
    """Report the caller's identity, or null when the token is absent or invalid"""
    if not user:
        return {"user": None}
    return {
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "picture": user.picture,
            "role": user.role,
            "mysql_id": user.id,
        }
    }


@router.get("/auth/google")
async def google_login(auth_service: AuthService = Depends(get_auth_service)):
    """Redirect the browser to Google's consent screen"""
    return RedirectResponse(auth_service.build_authorization_url(), status_code=302)


@router.get("/auth/google/callback")
def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Finish the redirect flow and hand the token to the frontend"""
    frontend_url = settings.FRONTEND_URL.rstrip("/")
    try:
        claims = auth_service.exchange_code(code, state)
        result = auth_service.sign_in_with_claims(claims)
    except AppError as e:
        logger.warning("google_callback_failed", extra={"status": e.status_code, "reason": e.detail})
        return RedirectResponse(f"{frontend_url}/login?error=auth_failed", status_code=302)

    return RedirectResponse(f"{frontend_url}?token={result['token']}", status_code=302)


@router.post("/auth/mobile")
def mobile_login(request: MobileLoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Sign in with a Google ID token obtained on the device"""
    claims = auth_service.verify_google_id_token(request.id_token)
    return auth_service.sign_in_with_claims(claims)


@router.get("/logout")
@router.get("/auth/logout")
async def logout():
    """Tokens are stateless; the client discards its copy"""
    return {"message": "Logged out successfully"}
