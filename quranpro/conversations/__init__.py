from .service import ConversationService

__all__ = ["ConversationService"]
