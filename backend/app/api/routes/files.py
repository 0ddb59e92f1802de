"""API routes for study file upload and summaries."""

import logging
import mimetypes
from uuid import UUID

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from sqlalchemy import select

from app.api.deps import DbSession, SummaryServiceDep
from app.config import get_settings
from app.db.models import Conversation, FileContext, Summary
from app.schemas.files import FileUploadResponse, SummarizeRequest, SummaryResponse
from app.services import text_extractor
from app.services.text_extraction import TextExtractionError, UnsupportedFileType

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/files", tags=["files"])

_GENERIC_MIME_TYPES = {"", "application/octet-stream"}


def _parse_chat_id(value: str | None) -> UUID | None:
    """Clients send an empty or placeholder chatId before the first message."""
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        return None


def _resolve_mime_type(upload: UploadFile) -> str:
    mime_type = (upload.content_type or "").split(";")[0].strip()
    if mime_type in _GENERIC_MIME_TYPES and upload.filename:
        guessed, _ = mimetypes.guess_type(upload.filename)
        return guessed or mime_type
    return mime_type


def _preview(text: str) -> str:
    limit = settings.file_preview_chars
    return text[:limit] + "..." if len(text) > limit else text


# =============================================================================
# UPLOAD
# =============================================================================


@router.post("/upload", response_model=FileUploadResponse)
async def upload_file(
    db: DbSession,
    file: UploadFile | None = File(None),
    chat_id: str | None = Form(None, alias="chatId"),
):
    """
    Extract text from an uploaded PDF, DOCX or plain-text file.

    When chatId names an existing conversation, the text (truncated) is
    attached to it as file context. The response carries a short preview and
    the full text.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    data = await file.read()
    if len(data) > settings.max_upload_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.max_upload_size_bytes // (1024 * 1024)}MB limit",
        )

    mime_type = _resolve_mime_type(file)
    try:
        text = await text_extractor.extract_text(data, mime_type)
    except (UnsupportedFileType, TextExtractionError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info("Extracted %d chars from %s (%s)", len(text), file.filename, mime_type)

    conversation_id = _parse_chat_id(chat_id)
    if conversation_id is not None:
        conversation = await db.get(Conversation, conversation_id)
        if conversation is not None:
            conversation.file_context.append(
                FileContext(
                    file_name=file.filename,
                    file_type=mime_type,
                    content=text[: settings.file_context_max_chars],
                )
            )
            conversation.touch()
            await db.commit()
        else:
            logger.info("Upload for unknown chat %s, not attaching", conversation_id)

    return FileUploadResponse(
        file_name=file.filename,
        content=_preview(text),
        full_content=text,
    )


# =============================================================================
# SUMMARIES
# =============================================================================


@router.post("/summarize/{chat_id}", response_model=SummaryResponse)
async def summarize(
    chat_id: UUID,
    request: SummarizeRequest,
    db: DbSession,
    summary_service: SummaryServiceDep,
):
    """
    Generate and store a structured study summary of file content.

    If the AI service cannot produce one, a placeholder summary is stored
    and returned with ``placeholder: true``.
    """
    outcome = await summary_service.generate(request.content)

    summary = Summary(
        chat_id=chat_id,
        file_name=request.file_name,
        original_content=request.content[: settings.summary_preview_chars],
        summary=outcome.summary.model_dump(by_alias=True, exclude_none=True),
        placeholder=outcome.placeholder,
    )
    db.add(summary)
    await db.commit()

    return SummaryResponse.model_validate(summary)


@router.get("/summaries/{chat_id}", response_model=list[SummaryResponse])
async def list_summaries(chat_id: UUID, db: DbSession):
    """List summaries generated in a conversation, newest first."""
    stmt = (
        select(Summary)
        .where(Summary.chat_id == chat_id)
        .order_by(Summary.created_at.desc())
    )
    result = await db.execute(stmt)
    return [SummaryResponse.model_validate(s) for s in result.scalars()]
