"""
Conversation and message store
"""
from typing import List, Optional

from quranpro.config.settings import settings
from quranpro.config.logger import logger
from quranpro.database import Conversation, ConversationStatus, DatabaseManager, Message, Sender
from quranpro.exceptions import NotFound, ValidationError

# Conversation ids are SERIAL (signed 32-bit) on PostgreSQL
MAX_CONVERSATION_ID = 2 ** 31 - 1


def parse_conversation_id(value) -> Optional[int]:
    """Integer id within the storable range, else None"""
    try:
        value = int(value)
    except (TypeError, ValueError):
        return None
    if not 1 <= value <= MAX_CONVERSATION_ID:
        return None
    return value


class ConversationService:
    """Conversations owned by a single user and their append-only messages"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def create(self, user_id: str, title: Optional[str] = None) -> Conversation:
        conversation = self.db.create_conversation(user_id, title or settings.DEFAULT_CONVERSATION_TITLE)
        logger.info("conversation_created", extra={"user_id": user_id, "conversation_id": conversation.id})
        return conversation

    def list(self, user_id: str) -> List[Conversation]:
        return self.db.get_user_conversations(user_id)

    def get(self, conversation_id: int) -> Optional[Conversation]:
        conversation_id = parse_conversation_id(conversation_id)
        if conversation_id is None:
            return None
        return self.db.get_conversation(conversation_id)

    def get_owned(self, user_id: str, conversation_id) -> Optional[Conversation]:
        """Conversation if it exists and belongs to the user, else None"""
        conversation = self.get(conversation_id)
        if conversation and conversation.user_id == user_id:
            return conversation
        return None

    def rename(self, user_id: str, conversation_id: int, title: str) -> bool:
        if not title:
            raise ValidationError("Title is required")
        conversation_id = parse_conversation_id(conversation_id)
        if conversation_id is None:
            return False
        return self.db.update_conversation_title(user_id, conversation_id, title)

    def update_status(self, user_id: str, conversation_id: int, status: int) -> bool:
        try:
            status = ConversationStatus(status)
        except ValueError:
            raise ValidationError("Invalid conversation status")
        conversation_id = parse_conversation_id(conversation_id)
        if conversation_id is None:
            return False
        return self.db.update_conversation_status(user_id, conversation_id, int(status))

    def delete(self, user_id: str, conversation_id: int) -> bool:
        conversation_id = parse_conversation_id(conversation_id)
        if conversation_id is None:
            return False
        deleted = self.db.delete_conversation(user_id, conversation_id)
        if deleted:
            logger.info("conversation_deleted", extra={"user_id": user_id, "conversation_id": conversation_id})
        return deleted

    def append_message(
        self,
        user_id: str,
        conversation_id: int,
        sender: str,
        text: str,
        context: Optional[str] = None,
    ) -> int:
        sender = Sender(sender).value
        conversation_id = parse_conversation_id(conversation_id)
        message_id = None
        if conversation_id is not None:
            message_id = self.db.add_message(user_id, conversation_id, sender, text, context)
        if message_id is None:
            raise NotFound("Conversation not found")
        return message_id

    def recent_messages(self, user_id: str, conversation_id: int, limit: int = None) -> List[Message]:
        """Last ``limit`` messages, oldest first"""
        conversation_id = parse_conversation_id(conversation_id)
        if conversation_id is None:
            return []
        return self.db.get_recent_messages(user_id, conversation_id, limit or settings.CHAT_CONTEXT_LIMIT)

    def list_messages(self, user_id: str, conversation_id: int) -> List[Message]:
        conversation_id = parse_conversation_id(conversation_id)
        if conversation_id is None:
            return []
        return self.db.get_conversation_messages(user_id, conversation_id)

    def search(self, user_id: str, conversation_id: int, query: str) -> List[Message]:
        if not query:
            raise ValidationError("Search query is required")
        conversation_id = parse_conversation_id(conversation_id)
        if conversation_id is None:
            return []
        return self.db.search_messages(user_id, conversation_id, query)
