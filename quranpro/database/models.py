"""
Data models for the Quran Pro API
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, Optional


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class ConversationStatus(IntEnum):
    ACTIVE = 0
    ARCHIVED = 1


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


@dataclass
class User:
    """User data model"""
    id: str = ""
    email: str = ""
    name: str = ""
    google_id: Optional[str] = None
    picture: Optional[str] = None
    preferences: Dict[str, Any] = field(default_factory=dict)
    role: str = UserRole.USER.value
    messages_used: int = 0
    messages_quota: int = 1000
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "preferences": self.preferences,
            "role": self.role,
            "messagesUsed": self.messages_used,
            "messagesQuota": self.messages_quota,
            "created_at": self.created_at,
            "last_login": self.last_login,
        }


@dataclass
class QuotaStatus:
    """Result of a quota check; ``remaining`` is None when unbounded"""
    can_send: bool
    remaining: Optional[int]
    used: int = 0
    quota: Optional[int] = None
    unlimited: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "remaining": self.remaining,
            "quota": self.quota,
            "total": self.quota,
            "used": self.used,
            "unlimited": self.unlimited,
        }


@dataclass
class Conversation:
    """Conversation data model"""
    id: int = 0
    user_id: str = ""
    title: str = ""
    status: int = ConversationStatus.ACTIVE.value
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "status": self.status,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Message:
    """Chat message data model; immutable once stored"""
    id: int = 0
    user_id: str = ""
    conversation_id: int = 0
    sender: str = Sender.USER.value
    text: str = ""
    context: Optional[str] = None
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "conversationId": self.conversation_id,
            "sender": self.sender,
            "text": self.text,
            "context": self.context,
            "timestamp": self.timestamp,
        }


@dataclass
class ReadingProgress:
    surah: int = 1
    ayah: int = 1
    updated_at: Optional[datetime] = None


@dataclass
class HistoryEntry:
    id: int = 0
    surah: int = 0
    ayah: int = 0
    action_type: Optional[str] = None
    duration_seconds: int = 0
    created_at: Optional[datetime] = None


@dataclass
class Favorite:
    id: int = 0
    user_id: str = ""
    type: str = ""
    reference_id: Optional[str] = None
    reference_text: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class ReadingGoal:
    id: int = 0
    user_id: str = ""
    goal_type: str = ""
    target_value: int = 0
    current_value: int = 0
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_completed: bool = False
    created_at: Optional[datetime] = None


@dataclass
class ReadingSession:
    id: int = 0
    user_id: str = ""
    device_info: Dict[str, Any] = field(default_factory=dict)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_seconds: int = 0
    verses_read: int = 0
    hasanat_earned: int = 0


@dataclass
class DailyStats:
    stat_date: Optional[str] = None
    hasanat: int = 0
    verses: int = 0
    time_seconds: int = 0
    pages_read: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "hasanat": self.hasanat,
            "verses": self.verses,
            "time_seconds": self.time_seconds,
            "pages_read": self.pages_read,
        }
        if self.stat_date is not None:
            data["date"] = self.stat_date
        return data


@dataclass
class Notification:
    """In-app notification"""
    id: int = 0
    user_id: str = ""
    title: str = ""
    message: str = ""
    notification_type: str = "general"
    metadata: Optional[Dict[str, Any]] = None
    is_read: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "type": self.notification_type,
            "metadata": self.metadata or {},
            "is_read": self.is_read,
            "created_at": self.created_at,
        }
