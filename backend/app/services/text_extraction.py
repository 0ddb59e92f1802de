"""Text extraction for uploaded study files (PDF, DOCX, plain text)."""

import io
import logging
import re

import docx
import pymupdf  # PyMuPDF

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"

SUPPORTED_MIME_TYPES = (PDF_MIME, DOCX_MIME, TEXT_MIME)

# Control characters that Postgres TEXT/VARCHAR cannot store (NUL, etc.)
_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


class UnsupportedFileType(ValueError):
    """The MIME type has no extractor."""


class TextExtractionError(ValueError):
    """The file claimed a supported type but could not be read."""


class TextExtractor:
    """Service for turning uploaded file bytes into raw text."""

    @staticmethod
    def _pdf_text(data: bytes) -> str:
        with pymupdf.open(stream=data, filetype="pdf") as doc:
            # Combine all pages with double newline separator
            return "\n\n".join(page.get_text() for page in doc)

    @staticmethod
    def _docx_text(data: bytes) -> str:
        document = docx.Document(io.BytesIO(data))
        return "\n".join(paragraph.text for paragraph in document.paragraphs)

    @staticmethod
    def _plain_text(data: bytes) -> str:
        return data.decode("utf-8")

    async def extract_text(self, data: bytes, mime_type: str) -> str:
        """
        Extract text from file bytes.

        Args:
            data: Raw bytes of the uploaded file
            mime_type: Declared MIME type (parameters such as charset are ignored)

        Returns:
            Extracted text with control characters removed

        Raises:
            UnsupportedFileType: MIME type is not PDF, DOCX or plain text
            TextExtractionError: The bytes could not be parsed as that type
        """
        base_type = (mime_type or "").split(";")[0].strip().lower()
        extractors = {
            PDF_MIME: self._pdf_text,
            DOCX_MIME: self._docx_text,
            TEXT_MIME: self._plain_text,
        }
        extractor = extractors.get(base_type)
        if extractor is None:
            raise UnsupportedFileType(f"Unsupported file type: {mime_type or 'unknown'}")

        try:
            text = extractor(data)
        except Exception as e:
            logger.warning("Text extraction failed for %s: %s", base_type, e)
            raise TextExtractionError("Failed to extract text from file") from e

        return _ILLEGAL_CHARS.sub("", text)


# Singleton instance
text_extractor = TextExtractor()
