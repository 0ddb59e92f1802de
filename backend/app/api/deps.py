"""
FastAPI dependencies.

Services are handed to routes through dependencies rather than imported
directly so tests can swap them with ``app.dependency_overrides``.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Conversation, Summary
from app.db.session import get_db
from app.services import chat_service, llm_client, response_cache, summary_service
from app.services.chat_service import ChatService
from app.services.llm_client import ModelFallbackClient
from app.services.response_cache import ResponseCache
from app.services.summary_service import SummaryService


def get_chat_service() -> ChatService:
    return chat_service


def get_summary_service() -> SummaryService:
    return summary_service


def get_response_cache() -> ResponseCache:
    return response_cache


def get_llm_client() -> ModelFallbackClient:
    return llm_client


# Type aliases for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
SummaryServiceDep = Annotated[SummaryService, Depends(get_summary_service)]
ResponseCacheDep = Annotated[ResponseCache, Depends(get_response_cache)]
LLMClientDep = Annotated[ModelFallbackClient, Depends(get_llm_client)]


# =============================================================================
# QUERY HELPERS
# =============================================================================


async def get_conversation_or_404(db: AsyncSession, chat_id: UUID) -> Conversation:
    """Fetch a conversation with its messages and file context, or raise 404."""
    conversation = await db.get(Conversation, chat_id)
    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
    return conversation


async def get_summary_or_404(db: AsyncSession, summary_id: UUID) -> Summary:
    summary = await db.get(Summary, summary_id)
    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Summary not found")
    return summary
