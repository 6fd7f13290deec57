from .pool import ConnectionPool, DatabaseError, IntegrityViolation
from .manager import DatabaseManager
from .models import (
    User, UserRole, QuotaStatus, Conversation, ConversationStatus, Message, Sender,
    ReadingProgress, HistoryEntry, Favorite, ReadingGoal, ReadingSession, DailyStats, Notification,
)

__all__ = [
    "ConnectionPool",
    "DatabaseError",
    "IntegrityViolation",
    "DatabaseManager",
    "User",
    "UserRole",
    "QuotaStatus",
    "Conversation",
    "ConversationStatus",
    "Message",
    "Sender",
    "ReadingProgress",
    "HistoryEntry",
    "Favorite",
    "ReadingGoal",
    "ReadingSession",
    "DailyStats",
    "Notification",
]
