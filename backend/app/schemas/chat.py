"""Pydantic schemas for chat operations."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.db.models import ChatMode, ChatRole
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


# Request schemas
class FileContextInput(BaseSchema):
    """File text supplied by the client alongside a message."""

    file_name: str
    content: str = ""


class ChatMessageRequest(BaseSchema):
    """Request to send a chat message."""

    message: str = Field(..., min_length=1, max_length=20000)
    chat_id: UUID | None = None
    mode: ChatMode | None = None
    file_context: list[FileContextInput] = Field(default_factory=list)


class UpdateModeRequest(BaseSchema):
    """Request to switch a conversation's mode."""

    mode: ChatMode


# Response schemas
class ChatMessageResponse(BaseSchema):
    """A single turn."""

    role: ChatRole
    content: str
    created_at: datetime


class FileContextResponse(BaseSchema):
    """File context attached to a conversation."""

    file_name: str
    file_type: str
    content: str
    uploaded_at: datetime


class ConversationResponse(BaseSchema, IDMixin, TimestampMixin):
    """Conversation with message history and attached files."""

    title: str
    mode: ChatMode
    messages: list[ChatMessageResponse]
    file_context: list[FileContextResponse]


class ConversationListItem(BaseSchema, IDMixin):
    """Conversation entry in the history sidebar."""

    title: str
    mode: ChatMode
    updated_at: datetime


class SendMessageResponse(BaseSchema):
    """Reply to a chat message plus the full updated history."""

    chat_id: UUID
    response: str
    messages: list[ChatMessageResponse]


class DeleteResponse(BaseSchema):
    """Confirmation message."""

    message: str
