"""
Authentication services for the Quran Pro API
"""
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import jwt
import requests
from email_validator import validate_email, EmailNotValidError
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from quranpro.config.settings import settings
from quranpro.config.logger import logger
from quranpro.database import DatabaseManager, DatabaseError, IntegrityViolation, User, UserRole
from quranpro.exceptions import Unauthenticated, ServiceUnavailable, ValidationError

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
OAUTH_STATE_PURPOSE = "google_oauth_state"


class AuthService:
    """Authentication service class"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    # -------- Bearer tokens --------
    def generate_token(self, user_id: str, email: str) -> str:
        """Generate JWT token for user"""
        payload = {
            "user_id": user_id,
            "email": email,
            "exp": datetime.now(timezone.utc) + timedelta(days=settings.JWT_EXPIRE_DAYS),
        }
        return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm="HS256")

    def verify_token(self, token: str) -> Optional[str]:
        """Verify JWT token and return user ID"""
        try:
            payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=["HS256"])
            return payload.get("user_id")
        except ExpiredSignatureError:
            return None
        except InvalidTokenError:
            return None

    def authenticate_token(self, token: str) -> User:
        """Resolve a bearer token to its user, or raise Unauthenticated"""
        user_id = self.verify_token(token)
        if not user_id:
            raise Unauthenticated("Invalid or expired token")

        try:
            user = self.db.get_user_by_id(user_id)
        except DatabaseError as e:
            logger.error("auth_lookup_failed", extra={"user_id": user_id, "error": str(e)})
            raise ServiceUnavailable("Authentication temporarily unavailable")

        if not user:
            raise Unauthenticated("User not found")
        return user

    # -------- Google OAuth --------
    def _require_google_config(self):
        if not settings.GOOGLE_CLIENT_ID:
            raise ServiceUnavailable("Google OAuth not configured")

    def verify_google_id_token(self, token: str) -> Dict[str, Any]:
        """Verify a Google ID token and return its claims"""
        self._require_google_config()
        if not token:
            raise Unauthenticated("Missing Google ID token")

        try:
            return id_token.verify_oauth2_token(token, google_requests.Request(), settings.GOOGLE_CLIENT_ID)
        except ValueError as e:
            logger.warning("google_token_rejected", extra={"error": str(e)})
            raise Unauthenticated("Invalid Google ID token")

    def _generate_state(self) -> str:
        payload = {
            "purpose": OAUTH_STATE_PURPOSE,
            "nonce": secrets.token_urlsafe(16),
            "exp": datetime.now(timezone.utc) + timedelta(minutes=settings.OAUTH_STATE_EXPIRE_MINUTES),
        }
        return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm="HS256")

    def _verify_state(self, state: Optional[str]) -> bool:
        if not state:
            return False
        try:
            payload = jwt.decode(state, settings.JWT_SECRET_KEY, algorithms=["HS256"])
        except InvalidTokenError:
            return False
        return payload.get("purpose") == OAUTH_STATE_PURPOSE

    def build_authorization_url(self) -> str:
        """Google consent screen URL for the browser redirect flow"""
        self._require_google_config()
        params = {
            "client_id": settings.GOOGLE_CLIENT_ID,
            "redirect_uri": settings.GOOGLE_CALLBACK_URL,
            "response_type": "code",
            "scope": "openid email profile",
            "state": self._generate_state(),
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str, state: Optional[str]) -> Dict[str, Any]:
        """Trade an authorization code for Google's ID token claims"""
        self._require_google_config()
        if not code or not self._verify_state(state):
            raise Unauthenticated("Invalid OAuth callback")

        try:
            response = requests.post(
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": settings.GOOGLE_CLIENT_ID,
                    "client_secret": settings.GOOGLE_CLIENT_SECRET,
                    "redirect_uri": settings.GOOGLE_CALLBACK_URL,
                    "grant_type": "authorization_code",
                },
                timeout=10,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("google_code_exchange_failed", extra={"error": str(e)})
            raise Unauthenticated("Google code exchange failed")

        return self.verify_google_id_token(payload.get("id_token"))

    # -------- Identity resolution --------
    @staticmethod
    def role_for_email(email: str) -> str:
        if email and email.lower() in settings.ADMIN_EMAILS:
            return UserRole.ADMIN.value
        return UserRole.USER.value

    @staticmethod
    def normalize_email(email: str) -> str:
        """Validate the email format and return it lowercased"""
        try:
            validate_email(email or "", check_deliverability=False)
        except EmailNotValidError:
            raise ValidationError("Invalid email format")
        return email.strip().lower()

    def _find_user(self, subject: str, email: str) -> Optional[User]:
        user = self.db.get_user_by_google_id(subject)
        if user:
            return user

        user = self.db.get_user_by_email(email)
        if user and not user.google_id:
            self.db.update_user_google_id(user.id, subject)
            user.google_id = subject
        return user

    def resolve_google_identity(
        self,
        subject: str,
        email: str,
        name: Optional[str] = None,
        picture: Optional[str] = None,
    ) -> User:
        """Find or create the user for a verified Google identity.

        Repeated calls with the same subject resolve to the same user. The
        role is synced from ADMIN_EMAILS and last_login stamped on every call.
        """
        if not subject:
            raise Unauthenticated("Google identity has no subject")
        email = self.normalize_email(email)
        role = self.role_for_email(email)

        try:
            user = self._find_user(subject, email)
            if not user:
                try:
                    user = self.db.create_user(
                        user_id=str(uuid.uuid4()),
                        email=email,
                        name=name or email.split("@")[0],
                        google_id=subject,
                        picture=picture,
                        preferences=dict(settings.DEFAULT_PREFERENCES),
                        role=role,
                        messages_quota=settings.DEFAULT_MESSAGES_QUOTA,
                    )
                    logger.info("user_created", extra={"user_id": user.id, "role": role})
                except IntegrityViolation:
                    # A concurrent sign-in created the row first
                    user = self._find_user(subject, email)
                    if not user:
                        raise

            self.db.record_user_login(user.id, role)
            user.role = role
            return user
        except DatabaseError as e:
            logger.error("identity_resolution_failed", extra={"email": email, "error": str(e)}, exc_info=True)
            raise ServiceUnavailable("Authentication temporarily unavailable")

    def sign_in_with_claims(self, claims: Dict[str, Any]) -> Dict[str, Any]:
        """Resolve verified Google claims and issue a bearer token"""
        user = self.resolve_google_identity(
            subject=claims.get("sub"),
            email=claims.get("email"),
            name=claims.get("name"),
            picture=claims.get("picture"),
        )
        token = self.generate_token(user.id, user.email)
        logger.info("user_signed_in", extra={"user_id": user.id, "role": user.role})
        return {"token": token, "user": user.to_dict()}
