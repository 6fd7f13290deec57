"""
Chat orchestration: quota, conversation, context window, completion, persistence
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from quranpro.config.settings import settings
from quranpro.config.logger import logger
from quranpro.conversations.service import ConversationService
from quranpro.database import DatabaseManager, Sender, User
from quranpro.exceptions import CompletionFailed, QuotaExceeded, ValidationError
from quranpro.quota.service import QuotaService


@dataclass
class ChatReply:
    message: str
    conversation_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "conversationId": self.conversation_id}


class ChatService:
    """One chatbot exchange per call.

    Order matters: the quota is checked before anything else, the completion
    runs before any write, and the counter is incremented only after both the
    user and the bot message are stored. A failed completion leaves no trace
    besides a conversation that may have been created for it.
    """

    def __init__(self, db: DatabaseManager, completion_client):
        self.completion_client = completion_client
        self.quota = QuotaService(db)
        self.conversations = ConversationService(db)

    def send_message(
        self,
        user: User,
        message: Optional[str],
        conversation_id: Any = None,
        title: Optional[str] = None,
    ) -> ChatReply:
        status = self.quota.check_quota(user)
        if not status.can_send:
            logger.info("chat_quota_exceeded", extra={"user_id": user.id, "used": status.used, "quota": status.quota})
            raise QuotaExceeded(settings.QUOTA_EXCEEDED_MESSAGE)

        if not message:
            raise ValidationError("Message is required")

        conversation = self.conversations.get_owned(user.id, conversation_id)
        if conversation is None:
            conversation = self.conversations.create(user.id, title)
        elif title:
            self.conversations.rename(user.id, conversation.id, title)

        history = self.conversations.recent_messages(user.id, conversation.id, settings.CHAT_CONTEXT_LIMIT)

        try:
            reply = self.completion_client.complete(history, message)
        except Exception as e:
            logger.error("chat_completion_failed", extra={
                "user_id": user.id,
                "conversation_id": conversation.id,
                "error": str(e),
            }, exc_info=True)
            raise CompletionFailed() from e

        self.conversations.append_message(user.id, conversation.id, Sender.USER.value, message)
        self.conversations.append_message(user.id, conversation.id, Sender.BOT.value, reply)
        self.quota.increment(user.id)

        logger.info("chat_completed", extra={
            "user_id": user.id,
            "conversation_id": conversation.id,
            "context_messages": len(history),
        })
        return ChatReply(message=reply, conversation_id=conversation.id)
