"""API routes for PDF export of notes and summaries."""

from uuid import UUID

from fastapi import APIRouter, Response

from app.api.deps import DbSession, get_summary_or_404
from app.schemas.pdf import PDFGenerateRequest
from app.services import pdf_renderer

router = APIRouter(prefix="/pdf", tags=["pdf"])


def _pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}.pdf"},
    )


@router.post("/generate")
async def generate_pdf(request: PDFGenerateRequest):
    """Render chat notes (markdown-ish text) as a downloadable PDF."""
    content = pdf_renderer.render_notes(request.content, request.title)
    return _pdf_response(content, pdf_renderer.safe_filename(request.title))


@router.post("/summary/{summary_id}")
async def generate_summary_pdf(summary_id: UUID, db: DbSession):
    """Render a stored study summary as a downloadable PDF."""
    summary = await get_summary_or_404(db, summary_id)
    content = pdf_renderer.render_summary(summary.summary, summary.file_name)
    return _pdf_response(
        content,
        f"summary-{pdf_renderer.safe_filename(summary.file_name, default='file')}",
    )
