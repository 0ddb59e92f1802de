"""Pydantic schemas for file upload and study summaries."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.base import BaseSchema, IDMixin


class FileUploadResponse(BaseSchema):
    """Extracted text of an uploaded file."""

    success: bool = True
    file_name: str
    content: str  # Preview
    full_content: str


class SummarizeRequest(BaseSchema):
    """Request to summarize extracted file content."""

    content: str = Field(..., min_length=1)
    file_name: str | None = None


# Structured summary as produced by the model. Keys outside the known shape
# are kept, and scalar fields accept numbers, so a well-formed model payload
# survives unchanged.
Scalar = str | int | float


class _SummaryPart(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class UnitTopics(_SummaryPart):
    unit: Scalar
    topics: list[Scalar] = Field(default_factory=list)
    importance: Scalar | None = None  # High / Medium / Low


class ExamPriority(_SummaryPart):
    topic: Scalar
    reason: Scalar | None = None
    weightage: Scalar | None = None


class StudySummary(_SummaryPart):
    """Unit-wise topics, key points and exam priorities."""

    unit_wise_topics: list[UnitTopics] = Field(default_factory=list)
    key_points: list[Scalar] = Field(default_factory=list)
    exam_priority: list[ExamPriority] = Field(default_factory=list)
    quick_revision: Scalar | list[Scalar] | None = None


class SummaryResponse(BaseSchema, IDMixin):
    """Persisted summary."""

    chat_id: UUID
    file_name: str | None = None
    original_content: str
    summary: StudySummary
    placeholder: bool = False
    created_at: datetime
