"""Extract raw text from uploaded résumé files (PDF, DOCX, TXT). In-memory only."""

import re
import unicodedata
from io import BytesIO
from pathlib import PurePath
from typing import Optional

import pdfplumber
from docx import Document

from europass_builder.config import ALLOWED_UPLOAD_EXTENSIONS, ALLOWED_UPLOAD_MIME_TYPES
from europass_builder.errors import ExtractionError, UnsupportedFileTypeError
from europass_builder.utils.logger import get_logger

logger = get_logger(__name__)

UNSUPPORTED_FILE_MESSAGE = "Please upload a PDF, DOC, DOCX, or TXT file"


def _normalize_unicode(text: str) -> str:
    """Normalize unicode (NFC) and replace problematic chars."""
    if not text:
        return ""
    return unicodedata.normalize("NFC", text).replace("\x00", "")


def _clean_cv_text(text: str, max_chars: int = 50000) -> str:
    """Remove excessive whitespace and normalize unicode for résumé content."""
    if not text or not text.strip():
        return ""
    t = _normalize_unicode(text)
    t = re.sub(r"[ \t]+", " ", t)
    t = re.sub(r"\n\s*\n\s*\n", "\n\n", t)
    t = t.strip()
    if len(t) > max_chars:
        t = t[:max_chars] + "\n\n[Content truncated.]"
    return t


def resolve_upload_kind(filename: str, mime_type: Optional[str] = None) -> Optional[str]:
    """Return the canonical extension ('.pdf', '.docx', '.doc', '.txt') or None.

    MIME type wins; the file extension is the fallback (browsers often send
    application/octet-stream).
    """
    kind = ALLOWED_UPLOAD_MIME_TYPES.get((mime_type or "").split(";")[0].strip().lower())
    if kind:
        return kind
    suffix = PurePath((filename or "").strip()).suffix.lower()
    return suffix if suffix in ALLOWED_UPLOAD_EXTENSIONS else None


def is_supported_upload(filename: str, mime_type: Optional[str] = None) -> bool:
    return resolve_upload_kind(filename, mime_type) is not None


def ensure_supported_upload(filename: str, mime_type: Optional[str] = None) -> str:
    """Reject unsupported uploads before any network call."""
    kind = resolve_upload_kind(filename, mime_type)
    if kind is None:
        logger.warning("Unsupported file type: %s (%s)", filename, mime_type)
        raise UnsupportedFileTypeError(UNSUPPORTED_FILE_MESSAGE)
    return kind


def _extract_pdf(bytes_io: BytesIO) -> str:
    """Extract text from PDF using pdfplumber."""
    try:
        with pdfplumber.open(bytes_io) as pdf:
            parts = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.exception("PDF extraction failed: %s", e)
        raise ExtractionError("Could not read the PDF file", str(e)) from e
    return "\n\n".join(p for p in parts if p.strip())


def _extract_docx(bytes_io: BytesIO) -> str:
    """Extract text from DOCX using python-docx (paragraphs, then table cells)."""
    try:
        doc = Document(bytes_io)
    except Exception as e:
        logger.exception("DOCX extraction failed: %s", e)
        raise ExtractionError("Could not read the DOCX file", str(e)) from e
    parts = [p.text for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [c.text.strip() for c in row.cells if c.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n\n".join(parts)


def _extract_txt(file_bytes: bytes) -> str:
    return file_bytes.decode("utf-8-sig", errors="replace")


def extract_text_from_file(file_bytes: bytes, filename: str, mime_type: Optional[str] = None) -> str:
    """
    Extract and clean text from an uploaded résumé (PDF, DOCX or TXT).
    Raises UnsupportedFileTypeError for other types and ExtractionError when
    no text can be read (including legacy binary .doc files).
    """
    kind = ensure_supported_upload(filename, mime_type)

    if kind == ".pdf":
        raw = _extract_pdf(BytesIO(file_bytes))
    elif kind == ".docx":
        raw = _extract_docx(BytesIO(file_bytes))
    elif kind == ".txt":
        raw = _extract_txt(file_bytes)
    else:
        raise ExtractionError("Legacy .doc files cannot be read; save the résumé as DOCX, PDF or TXT and retry")

    text = _clean_cv_text(raw)
    if not text:
        raise ExtractionError(f"No readable text found in {filename or 'the uploaded file'}")
    logger.info("Extracted %s characters from %s", len(text), filename)
    return text
