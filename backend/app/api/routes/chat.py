"""API routes for chat conversations."""

import logging
from uuid import UUID

from fastapi import APIRouter
from sqlalchemy import select

from app.api.deps import ChatServiceDep, DbSession, get_conversation_or_404
from app.db.models import Conversation
from app.schemas.chat import (
    ChatMessageRequest,
    ChatMessageResponse,
    ConversationListItem,
    ConversationResponse,
    DeleteResponse,
    SendMessageResponse,
    UpdateModeRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/message", response_model=SendMessageResponse)
async def send_message(
    request: ChatMessageRequest,
    db: DbSession,
    chat_service: ChatServiceDep,
):
    """
    Send a message and get the mentor's reply.

    Starts a new conversation when no chatId is given. If the AI service is
    unavailable the reply is a fixed apology, which is still saved.
    """
    conversation = None
    if request.chat_id is not None:
        conversation = await get_conversation_or_404(db, request.chat_id)

    conversation, reply = await chat_service.send_message(
        db,
        request.message,
        conversation=conversation,
        mode=request.mode,
        file_context=request.file_context,
    )

    return SendMessageResponse(
        chat_id=conversation.id,
        response=reply,
        messages=[ChatMessageResponse.model_validate(m) for m in conversation.messages],
    )


@router.get("/history/{chat_id}", response_model=ConversationResponse)
async def get_chat_history(chat_id: UUID, db: DbSession):
    """Get a conversation with its full message history."""
    conversation = await get_conversation_or_404(db, chat_id)
    return ConversationResponse.model_validate(conversation)


@router.get("/histories", response_model=list[ConversationListItem])
async def list_chats(db: DbSession):
    """List conversations, most recently updated first."""
    stmt = select(
        Conversation.id,
        Conversation.title,
        Conversation.mode,
        Conversation.updated_at,
    ).order_by(Conversation.updated_at.desc())
    result = await db.execute(stmt)
    return [ConversationListItem.model_validate(row) for row in result]


@router.put("/mode/{chat_id}", response_model=ConversationResponse)
async def update_mode(chat_id: UUID, request: UpdateModeRequest, db: DbSession):
    """Switch the mentoring mode of a conversation."""
    conversation = await get_conversation_or_404(db, chat_id)
    conversation.mode = request.mode.value
    conversation.touch()
    await db.commit()
    return ConversationResponse.model_validate(conversation)


@router.delete("/{chat_id}", response_model=DeleteResponse)
async def delete_chat(chat_id: UUID, db: DbSession):
    """Delete a conversation with its messages and file context. Summaries are kept."""
    conversation = await get_conversation_or_404(db, chat_id)
    await db.delete(conversation)
    await db.commit()
    logger.info("Deleted chat %s", chat_id)
    return DeleteResponse(message="Chat deleted successfully")
