from .completion import CompletionClient, build_messages
from .service import ChatReply, ChatService

__all__ = ["CompletionClient", "build_messages", "ChatReply", "ChatService"]
