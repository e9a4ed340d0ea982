"""Extract raw text from uploaded resume files (plain text, PDF). In-memory only."""

import asyncio
import re
import unicodedata
from io import BytesIO

from job_match_ai.errors import ExtractionError
from job_match_ai.schemas.resume_profile import ResumeUpload
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
TEXT_CONTENT_TYPE = "text/plain"


def _normalize_unicode(text: str) -> str:
    """Normalize unicode (NFC) and replace problematic chars."""
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def _clean_resume_text(text: str, max_chars: int = 50000) -> str:
    """Remove excessive whitespace and normalize unicode for resume content."""
    if not text or not text.strip():
        return ""
    t = _normalize_unicode(text)
    t = re.sub(r"[ \t]+", " ", t)
    t = re.sub(r"\n\s*\n\s*\n", "\n\n", t)
    t = t.strip()
    if len(t) > max_chars:
        t = t[:max_chars]
    return t


def _extract_pdf(data: bytes) -> str:
    """Extract text from PDF using pdfplumber."""
    import pdfplumber

    try:
        with pdfplumber.open(BytesIO(data)) as pdf:
            parts = []
            for page in pdf.pages:
                ptext = page.extract_text()
                if ptext:
                    parts.append(ptext)
            return "\n\n".join(parts)
    except Exception as e:
        logger.exception("PDF extraction failed: %s", e)
        raise ExtractionError(f"Could not read PDF: {e}") from e


def _extract_plain(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning("Plain-text resume is not valid UTF-8: %s", e)
        raise ExtractionError("Text file is not valid UTF-8") from e


def extract_text(upload: ResumeUpload) -> str:
    """
    Extract and clean text from an uploaded resume.
    Callers reject unsupported types first; anything unreadable or empty raises ExtractionError.
    """
    if upload.content_type == PDF_CONTENT_TYPE:
        raw = _extract_pdf(upload.data)
    elif upload.content_type == TEXT_CONTENT_TYPE:
        raw = _extract_plain(upload.data)
    else:
        raise ExtractionError(f"No extractor for content type {upload.content_type!r}")

    text = _clean_resume_text(raw)
    if not text:
        raise ExtractionError("Document contains no readable text")
    return text


async def extract_text_async(upload: ResumeUpload) -> str:
    """extract_text run in a worker thread so PDF parsing does not block the loop."""
    return await asyncio.to_thread(extract_text, upload)
