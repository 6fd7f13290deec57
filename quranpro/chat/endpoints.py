"""
Chatbot API endpoints for the Quran Pro API
"""
from typing import Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from quranpro.auth.deps import get_completion_client, get_current_user, get_database
from quranpro.chat.service import ChatService
from quranpro.database import DatabaseManager, User
from quranpro.quota.service import QuotaService

router = APIRouter(prefix="/api", tags=["chat"])


class ChatRequest(BaseModel):
    # Presence of message is checked after the quota, so it is optional here
    message: Optional[str] = None
    conversation_id: Optional[Union[int, str]] = Field(None, alias="conversationId")
    title: Optional[str] = None

    model_config = {"populate_by_name": True}


def get_chat_service(
    db: DatabaseManager = Depends(get_database),
    completion_client=Depends(get_completion_client),
) -> ChatService:
    return ChatService(db, completion_client)


@router.post("/chat")
def chat(
    request: ChatRequest,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Send a message to the assistant and store the exchange"""
    reply = service.send_message(user, request.message, request.conversation_id, request.title)
    return reply.to_dict()


@router.get("/chatbot/quota")
def get_quota(user: User = Depends(get_current_user), db: DatabaseManager = Depends(get_database)):
    return QuotaService(db).check_quota(user).to_dict()
