"""Pydantic schemas for PDF export."""

from pydantic import Field

from app.schemas.base import BaseSchema


class PDFGenerateRequest(BaseSchema):
    """Notes to render as a PDF."""

    content: str = ""
    title: str | None = Field(None, max_length=255)
