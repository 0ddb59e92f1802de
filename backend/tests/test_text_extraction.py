"""Tests for text extraction from uploaded files."""

import io

import docx
import pymupdf
import pytest

from app.services.text_extraction import (
    DOCX_MIME,
    PDF_MIME,
    TextExtractionError,
    TextExtractor,
    UnsupportedFileType,
)


@pytest.fixture
def extractor() -> TextExtractor:
    return TextExtractor()


def make_pdf(*pages: str) -> bytes:
    doc = pymupdf.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


async def test_plain_text_ignores_charset_parameter(extractor):
    text = await extractor.extract_text("Unit 1: Sets".encode(), "text/plain; charset=utf-8")
    assert text == "Unit 1: Sets"


async def test_control_characters_are_removed(extractor):
    text = await extractor.extract_text(b"a\x00b\tc\nd", "text/plain")
    assert text == "ab\tc\nd"


async def test_pdf_pages_are_joined(extractor):
    text = await extractor.extract_text(make_pdf("Page one", "Page two"), PDF_MIME)

    first, second = text.split("\n\n")
    assert first.strip() == "Page one"
    assert second.strip() == "Page two"


async def test_docx_paragraphs(extractor):
    document = docx.Document()
    document.add_paragraph("Heading")
    document.add_paragraph("Body")
    buffer = io.BytesIO()
    document.save(buffer)

    assert await extractor.extract_text(buffer.getvalue(), DOCX_MIME) == "Heading\nBody"


async def test_unsupported_type(extractor):
    with pytest.raises(UnsupportedFileType, match="image/png"):
        await extractor.extract_text(b"\x89PNG", "image/png")


async def test_corrupt_docx(extractor):
    with pytest.raises(TextExtractionError):
        await extractor.extract_text(b"not a zip", DOCX_MIME)


async def test_invalid_utf8(extractor):
    with pytest.raises(TextExtractionError):
        await extractor.extract_text(b"\xff\xfe\xfa", "text/plain")
