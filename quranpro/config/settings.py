"""
Configuration settings for the Quran Pro API
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _split_list(raw: str) -> list:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


DEFAULT_SYSTEM_PROMPT = (
    "You are a caring Islamic assistant. You explain Islam with gentleness, wisdom and respect. "
    "You always cite your sources: verses of the Quran (with surah and verse number), authentic "
    "hadiths (with reference), or the opinions of well-known scholars. If you do not know the "
    "answer, say so kindly. You speak like a close, reassuring and sincere friend. "
    "You do not answer any question that is not about Islam."
)


class Settings:
    """Application settings"""

    # API Configuration
    APP_NAME = os.getenv('APP_NAME', "Quran Pro API")
    VERSION = "1.0.0"
    HOST = os.getenv('HOST', "0.0.0.0")
    PORT = int(os.getenv('PORT', 3000))
    ENVIRONMENT = os.getenv('ENVIRONMENT', 'development').lower()

    # OpenAI Configuration
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-3.5-turbo')
    OPENAI_TEMPERATURE = float(os.getenv('OPENAI_TEMPERATURE', 0.7))
    OPENAI_MAX_TOKENS = int(os.getenv('OPENAI_MAX_TOKENS', 500))

    # Google OAuth Configuration
    GOOGLE_CLIENT_ID = os.getenv('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.getenv('GOOGLE_CLIENT_SECRET')
    GOOGLE_CALLBACK_URL = os.getenv('GOOGLE_CALLBACK_URL', 'http://localhost:3000/auth/google/callback')
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')

    # JWT
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_EXPIRE_DAYS = int(os.getenv('JWT_EXPIRE_DAYS', 7))
    OAUTH_STATE_EXPIRE_MINUTES = 10

    # Database Configuration
    DATABASE_NAME = os.getenv('DATABASE_NAME', "quranpro.db")  # SQLite fallback

    DB_HOST = os.getenv('DB_HOST')
    DB_PORT = int(os.getenv('DB_PORT', 5432))
    DB_NAME = os.getenv('DB_NAME')
    DB_USER = os.getenv('DB_USER')
    DB_PASSWORD = os.getenv('DB_PASSWORD')
    DB_SSLMODE = os.getenv('DB_SSLMODE', 'prefer')

    USE_RDS = bool(DB_HOST and DB_NAME and DB_USER and DB_PASSWORD)

    # Database Connection Pool Settings
    DB_POOL_SIZE = int(os.getenv('DB_POOL_SIZE', 10))
    DB_POOL_TIMEOUT = int(os.getenv('DB_POOL_TIMEOUT', 0))  # 0 = wait for a free connection

    # CORS
    CORS_ORIGINS = _split_list(os.getenv(
        'CORS_ORIGINS',
        "https://www.quran-pro.harrmos.com,http://localhost:5173,http://localhost:3000,"
        "http://localhost,http://127.0.0.1:5173,http://127.0.0.1:3000",
    ))

    # Accounts granted the admin role (quota exemption + /admin routes)
    ADMIN_EMAILS = [email.lower() for email in _split_list(os.getenv('ADMIN_EMAILS', ''))]

    # Chatbot Configuration
    DEFAULT_MESSAGES_QUOTA = int(os.getenv('DEFAULT_MESSAGES_QUOTA', 1000))
    CHAT_CONTEXT_LIMIT = int(os.getenv('CHAT_CONTEXT_LIMIT', 10))
    DEFAULT_CONVERSATION_TITLE = os.getenv('DEFAULT_CONVERSATION_TITLE', 'New conversation')
    CHAT_SYSTEM_PROMPT = os.getenv('CHAT_SYSTEM_PROMPT', DEFAULT_SYSTEM_PROMPT)
    QUOTA_EXCEEDED_MESSAGE = (
        "Free message quota exceeded. Please purchase more messages to keep using the chatbot."
    )

    # Tracking limits
    HISTORY_DEFAULT_LIMIT = 50
    HISTORY_MAX_LIMIT = 100
    DAILY_STATS_DEFAULT_DAYS = 30
    DAILY_STATS_MAX_DAYS = 365

    DEFAULT_PREFERENCES = {
        "theme": "default",
        "arabicFont": "Amiri",
        "arabicFontSize": "2.5rem",
        "reciter": "mishary_rashid_alafasy",
    }

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT == 'development'

    @classmethod
    def validate(cls):
        """Validate required settings"""
        if not cls.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY not found in environment variables")

        if not cls.JWT_SECRET_KEY:
            raise ValueError("JWT_SECRET_KEY not found in environment variables")

        if cls.USE_RDS and not all([cls.DB_HOST, cls.DB_NAME, cls.DB_USER, cls.DB_PASSWORD]):
            raise ValueError("Database configuration incomplete. Please set DB_HOST, DB_NAME, DB_USER, and DB_PASSWORD")

        if cls.DB_POOL_SIZE < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")

        if cls.DEFAULT_MESSAGES_QUOTA < 1:
            raise ValueError("DEFAULT_MESSAGES_QUOTA must be at least 1")


# Global settings instance
settings = Settings()
