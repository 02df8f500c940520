"""LLM-based extraction of a structured résumé from raw résumé text."""

import asyncio
from typing import List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, OpenAIError

from europass_builder.config import (
    HTTP_TIMEOUT_SECONDS,
    LLM_BASE_URL,
    LLM_MAX_TOKENS,
    LLM_TEMPERATURE,
    MAX_EXTRACTION_CHARS,
    MODEL_NAME,
    PERPLEXITY_API_KEY,
)
from europass_builder.cv_pipeline.response_parser import Err, parse_extraction_response
from europass_builder.cv_pipeline.text_extractor import extract_text_from_file
from europass_builder.errors import ExtractionError
from europass_builder.schemas import ResumeDocument
from europass_builder.utils.logger import get_logger

logger = get_logger(__name__)

RESUME_EXTRACTION_SYSTEM_PROMPT = """You are a resume data extraction system.
Extract every piece of information from the resume text and return it as one JSON object
with exactly this structure (no markdown, no code block, no commentary):
{
  "personalInfo": {
    "firstName": "string",
    "lastName": "string",
    "nationality": "string",
    "phone": "string",
    "email": "string",
    "linkedin": "string",
    "address": "string",
    "aboutMe": "string",
    "profilePhoto": ""
  },
  "education": [
    {"id": "edu-1", "startYear": "string", "endYear": "string or 'Present'", "location": "string",
     "degree": "string", "institution": "string"}
  ],
  "experience": [
    {"id": "exp-1", "startDate": "MM/YYYY", "endDate": "MM/YYYY or empty if current", "location": "string",
     "position": "string", "company": "string", "responsibilities": ["string"], "currentJob": true or false}
  ],
  "motherTongue": "string",
  "languages": [
    {"id": "lang-1", "language": "string", "reading": "A1|A2|B1|B2|C1|C2",
     "speaking": "A1|A2|B1|B2|C1|C2", "writing": "A1|A2|B1|B2|C1|C2"}
  ],
  "medicalSkills": ["string"],
  "hobbies": "comma-separated string"
}
- aboutMe: a brief professional summary built from the resume (mention key technical skills here).
- education: every degree and certification, most recent first.
- experience: every job; treat significant projects and leadership roles as experience entries.
- languages: foreign languages only; use B2 when the level is not stated. motherTongue: the native language if stated or clearly implied.
- medicalSkills: clinical, technical or specialised healthcare skills if present, otherwise [].
If a field cannot be determined, use an empty string, empty array or false."""


def build_extraction_messages(resume_text: str, filename: str) -> List[dict]:
    content = resume_text[:MAX_EXTRACTION_CHARS].strip()
    return [
        {"role": "system", "content": RESUME_EXTRACTION_SYSTEM_PROMPT},
        {"role": "user", "content": f"File name: {filename}\n\nResume content:\n\n{content}"},
    ]


def create_client(api_key: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> AsyncOpenAI:
    """OpenAI-compatible client for the completion endpoint. No automatic retries."""
    return AsyncOpenAI(
        api_key=api_key,
        base_url=LLM_BASE_URL,
        max_retries=0,
        http_client=httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=transport),
    )


async def extract_resume_document(client: AsyncOpenAI, resume_text: str, filename: str) -> ResumeDocument:
    """Call the LLM and turn its answer into a normalized ResumeDocument.

    Raises ExtractionError on upstream failure or when no JSON object can be recovered.
    """
    if not resume_text or not resume_text.strip():
        raise ExtractionError("File content is required")
    try:
        response = await client.chat.completions.create(
            model=MODEL_NAME,
            messages=build_extraction_messages(resume_text, filename),
            temperature=LLM_TEMPERATURE,
            max_tokens=LLM_MAX_TOKENS,
        )
    except APIStatusError as e:
        logger.error("Extraction API error for %s: %s %s", filename, e.status_code, e.message)
        raise ExtractionError(f"Extraction service error ({e.status_code})", e.message) from e
    except APIConnectionError as e:
        logger.error("Extraction API unreachable for %s: %s", filename, e)
        raise ExtractionError("Could not reach the extraction service", str(e)) from e
    except OpenAIError as e:
        logger.exception("Extraction request failed for %s: %s", filename, e)
        raise ExtractionError("Extraction request failed", str(e)) from e

    choice = response.choices[0] if response.choices else None
    if not choice or not choice.message or not choice.message.content:
        raise ExtractionError("No content received from the extraction service")

    result = parse_extraction_response(choice.message.content)
    if isinstance(result, Err):
        logger.warning("Unusable extraction response for %s: %s", filename, result.reason)
        raise ExtractionError("Could not read resume data from the extraction response", result.reason)
    logger.info(
        "Extracted resume for %s: education=%s experience=%s languages=%s",
        filename,
        len(result.document.education),
        len(result.document.experience),
        len(result.document.languages),
    )
    return result.document


async def _extract_with_new_client(api_key: str, resume_text: str, filename: str) -> ResumeDocument:
    async with create_client(api_key) as client:
        return await extract_resume_document(client, resume_text, filename)


def run_resume_pipeline(
    file_bytes: bytes,
    filename: str,
    mime_type: Optional[str] = None,
    api_key: Optional[str] = None,
) -> ResumeDocument:
    """
    Run the full pipeline: type gate, text extraction, then LLM extraction.
    Uses its own event loop; safe to call from sync context (e.g. Streamlit).
    Raises UnsupportedFileTypeError or ExtractionError; never returns a default document.
    """
    resume_text = extract_text_from_file(file_bytes, filename, mime_type)
    api_key = PERPLEXITY_API_KEY if api_key is None else api_key
    if not api_key:
        logger.error("PERPLEXITY_API_KEY is not set; cannot run resume extraction")
        raise ExtractionError("PERPLEXITY_API_KEY is not set. Add it to your .env file.")
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(_extract_with_new_client(api_key, resume_text, filename))
    finally:
        loop.close()
