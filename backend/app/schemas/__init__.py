"""Pydantic schemas for API request/response validation."""

from app.schemas.ai import CacheStatsResponse, ModelProbeResponse
from app.schemas.chat import (
    ChatMessageRequest,
    ChatMessageResponse,
    ConversationListItem,
    ConversationResponse,
    DeleteResponse,
    FileContextInput,
    FileContextResponse,
    SendMessageResponse,
    UpdateModeRequest,
)
from app.schemas.files import (
    FileUploadResponse,
    StudySummary,
    SummarizeRequest,
    SummaryResponse,
)
from app.schemas.pdf import PDFGenerateRequest

__all__ = [
    # Chat
    "ChatMessageRequest",
    "ChatMessageResponse",
    "ConversationListItem",
    "ConversationResponse",
    "DeleteResponse",
    "FileContextInput",
    "FileContextResponse",
    "SendMessageResponse",
    "UpdateModeRequest",
    # Files
    "FileUploadResponse",
    "StudySummary",
    "SummarizeRequest",
    "SummaryResponse",
    # PDF
    "PDFGenerateRequest",
    # AI
    "CacheStatsResponse",
    "ModelProbeResponse",
]
