"""
Conversation and message API endpoints for the Quran Pro API
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from quranpro.auth.deps import get_current_user_id, get_database
from quranpro.conversations.service import ConversationService
from quranpro.database import DatabaseManager
from quranpro.exceptions import NotFound, ValidationError

router = APIRouter(prefix="/api", tags=["conversations"])


class ConversationCreateRequest(BaseModel):
    title: Optional[str] = None


class ConversationTitleRequest(BaseModel):
    title: Optional[str] = None


class ConversationStatusRequest(BaseModel):
    status: int


def get_conversation_service(db: DatabaseManager = Depends(get_database)) -> ConversationService:
    return ConversationService(db)


@router.get("/conversations")
def list_conversations(
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
):
    """List the caller's conversations, newest first"""
    return [conversation.to_dict() for conversation in service.list(user_id)]


@router.post("/conversations", status_code=status.HTTP_201_CREATED)
def create_conversation(
    request: Optional[ConversationCreateRequest] = None,
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
):
    conversation = service.create(user_id, request.title if request else None)
    return conversation.to_dict()


@router.delete("/conversations/{conversation_id}")
def delete_conversation(
    conversation_id: int,
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
):
    """Delete a conversation and its messages"""
    if not service.delete(user_id, conversation_id):
        raise NotFound("Conversation not found")
    return {"success": True}


@router.put("/conversations/{conversation_id}/title")
def rename_conversation(
    conversation_id: int,
    request: ConversationTitleRequest,
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
):
    if not service.rename(user_id, conversation_id, request.title):
        raise NotFound("Conversation not found")
    return {"success": True}


@router.put("/conversations/{conversation_id}/status")
def update_conversation_status(
    conversation_id: int,
    request: ConversationStatusRequest,
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
):
    if not service.update_status(user_id, conversation_id, request.status):
        raise NotFound("Conversation not found")
    return {"success": True}


@router.get("/messages")
def list_messages(
    conversation_id: Optional[str] = Query(None, alias="conversationId"),
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
):
    """Messages of one conversation, oldest first; empty when not owned"""
    try:
        parsed_id = int(conversation_id)
    except (TypeError, ValueError):
        raise ValidationError("conversationId is required")
    return [message.to_dict() for message in service.list_messages(user_id, parsed_id)]


@router.get("/messages/{conversation_id}/search")
def search_messages(
    conversation_id: int,
    query: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
):
    return [message.to_dict() for message in service.search(user_id, conversation_id, query)]
