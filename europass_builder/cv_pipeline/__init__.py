"""Résumé upload pipeline: type gate, text extraction (PDF/DOCX/TXT), LLM extraction."""

from .response_parser import Err, Ok, ParseResult, parse_extraction_response
from .resume_extractor import extract_resume_document, run_resume_pipeline
from .text_extractor import ensure_supported_upload, extract_text_from_file, is_supported_upload

__all__ = [
    "run_resume_pipeline",
    "extract_resume_document",
    "extract_text_from_file",
    "ensure_supported_upload",
    "is_supported_upload",
    "parse_extraction_response",
    "ParseResult",
    "Ok",
    "Err",
]
