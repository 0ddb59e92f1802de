"""
SQLAlchemy 2.0 Models for MentorAI.

Uses modern declarative syntax with Mapped[] type annotations.
Column types are portable (Uuid, JSON) so the same models run on Postgres
in production and SQLite in tests; JSON becomes JSONB on Postgres.
"""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text, Uuid, false, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================


class ChatMode(str, PyEnum):
    """Mentoring mode, selects the system prompt."""

    EXAM = "exam"
    CODING = "coding"
    SYLLABUS = "syllabus"


class ChatRole(str, PyEnum):
    """Role in chat conversation."""

    USER = "user"
    ASSISTANT = "assistant"


DEFAULT_TITLE = "New Chat"


# =============================================================================
# MODELS
# =============================================================================


class Conversation(Base):
    """
    Chat conversation with the mentor.

    Messages are append-only and ordered by ``position``. Uploaded file
    contexts belong to exactly one conversation and are removed with it.
    """

    __tablename__ = "conversations"
    __table_args__ = (Index("idx_conversations_updated_at", "updated_at"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(
        String(), nullable=False, default=DEFAULT_TITLE, server_default=DEFAULT_TITLE
    )
    mode: Mapped[str] = mapped_column(
        String(), nullable=False, default=ChatMode.EXAM.value, server_default=ChatMode.EXAM.value
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="ChatMessage.position",
        lazy="selectin",
    )
    file_context: Mapped[list["FileContext"]] = relationship(
        "FileContext",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="FileContext.uploaded_at",
        lazy="selectin",
    )

    def append_message(self, role: ChatRole, content: str) -> "ChatMessage":
        """Append a turn at the end of the conversation."""
        message = ChatMessage(
            role=role.value,
            content=content,
            position=len(self.messages),
            created_at=utcnow(),
        )
        self.messages.append(message)
        return message

    def touch(self) -> None:
        self.updated_at = utcnow()


class ChatMessage(Base):
    """
    Individual turn in a conversation.

    Stores user messages and assistant responses.
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("idx_chat_messages_conversation_position", "conversation_id", "position", unique=True),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    conversation_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(nullable=False)
    role: Mapped[str] = mapped_column(String(), nullable=False)  # 'user' or 'assistant'
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Timestamp
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    conversation: Mapped["Conversation"] = relationship(
        "Conversation", back_populates="messages"
    )


class FileContext(Base):
    """Extracted text of an uploaded study file, attached to a conversation."""

    __tablename__ = "file_contexts"
    __table_args__ = (Index("idx_file_contexts_conversation_id", "conversation_id"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    conversation_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )
    file_name: Mapped[str] = mapped_column(String(), nullable=False)
    file_type: Mapped[str] = mapped_column(String(), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    conversation: Mapped["Conversation"] = relationship(
        "Conversation", back_populates="file_context"
    )


class Summary(Base):
    """
    Structured study summary generated from file content.

    ``chat_id`` is a plain reference, not a foreign key: summaries outlive
    the conversation they were generated in. ``placeholder`` marks rows whose
    ``summary`` is the stub produced when the model output could not be used.
    """

    __tablename__ = "summaries"
    __table_args__ = (Index("idx_summaries_chat_id", "chat_id"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    chat_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    file_name: Mapped[Optional[str]] = mapped_column(String(), nullable=True)
    original_content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    summary: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    placeholder: Mapped[bool] = mapped_column(nullable=False, default=False, server_default=false())

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
